import time

import pytest

from graph_script_runner.execution.policy import CountingReplacementPolicy, should_rotate


def test_rotation_by_execution_threshold() -> None:
    assert should_rotate(executions=500, age_seconds=0.0, threshold=500, max_age_seconds=None) is True
    assert should_rotate(executions=499, age_seconds=0.0, threshold=500, max_age_seconds=None) is False


def test_rotation_by_age_threshold() -> None:
    assert should_rotate(executions=1, age_seconds=601.0, threshold=500, max_age_seconds=600) is True
    assert should_rotate(executions=1, age_seconds=601.0, threshold=500, max_age_seconds=None) is False


def test_policy_counts_until_threshold() -> None:
    policy = CountingReplacementPolicy(threshold=3)
    for _ in range(2):
        policy.on_execution_starting()
    assert policy.should_replace() is False
    policy.on_execution_starting()
    assert policy.should_replace() is True
    assert policy.executions == 3


def test_policy_reset_zeroes_counter() -> None:
    policy = CountingReplacementPolicy(threshold=1)
    policy.on_execution_starting()
    assert policy.should_replace() is True
    policy.on_engine_replaced()
    assert policy.executions == 0
    assert policy.should_replace() is False


def test_policy_default_threshold_is_500() -> None:
    assert CountingReplacementPolicy().threshold == 500


def test_policy_age_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    policy = CountingReplacementPolicy(threshold=100, max_age_seconds=10)
    start = time.monotonic()
    monkeypatch.setattr(time, "monotonic", lambda: start + 11)
    assert policy.should_replace() is True
    policy.on_engine_replaced()
    assert policy.should_replace() is False


@pytest.mark.parametrize("threshold", [0, -5])
def test_policy_rejects_non_positive_threshold(threshold: int) -> None:
    with pytest.raises(ValueError, match="threshold"):
        CountingReplacementPolicy(threshold=threshold)
