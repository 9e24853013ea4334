from __future__ import annotations

import threading
import time
from typing import Protocol

DEFAULT_REPLACEMENT_THRESHOLD = 500


class ReplacementPolicy(Protocol):
    def on_execution_starting(self) -> None:
        """Count one evaluation attempt against the current engine.

        Example:
            ```python
            policy.on_execution_starting()
            ```
        """
        ...

    def should_replace(self) -> bool:
        """Return True when the current engine must be rebuilt.

        Example:
            ```python
            if policy.should_replace():
                engine = create_engine("python")
            ```
        """
        ...

    def on_engine_replaced(self) -> None:
        """Reset policy state after a new engine was installed.

        Example:
            ```python
            policy.on_engine_replaced()
            ```
        """
        ...


def should_rotate(
    executions: int,
    age_seconds: float,
    threshold: int,
    max_age_seconds: float | None,
) -> bool:
    """Decide whether an engine has served long enough to be replaced.

    Example:
        ```python
        rotate = should_rotate(executions=500, age_seconds=12.0, threshold=500, max_age_seconds=None)
        ```
    """
    if executions >= threshold:
        return True
    return max_age_seconds is not None and age_seconds >= max_age_seconds


class CountingReplacementPolicy:
    """Replace the engine after a fixed number of evaluations.

    An optional `max_age_seconds` also retires engines by age.

    Example:
        ```python
        policy = CountingReplacementPolicy(threshold=500)
        ```
    """

    def __init__(
        self,
        threshold: int = DEFAULT_REPLACEMENT_THRESHOLD,
        *,
        max_age_seconds: float | None = None,
    ) -> None:
        """Validate limits and start with a zeroed counter.

        Example:
            ```python
            policy = CountingReplacementPolicy(threshold=100, max_age_seconds=600)
            ```
        """
        if threshold < 1:
            raise ValueError("threshold must be a positive integer")
        if max_age_seconds is not None and max_age_seconds <= 0:
            raise ValueError("max_age_seconds must be positive when set")
        self.threshold = threshold
        self.max_age_seconds = max_age_seconds
        self._lock = threading.Lock()
        self._executions = 0
        self._installed_at = time.monotonic()

    @property
    def executions(self) -> int:
        """Evaluations counted since the last replacement.

        Example:
            ```python
            assert policy.executions == 0
            ```
        """
        with self._lock:
            return self._executions

    def on_execution_starting(self) -> None:
        """Increment the evaluation counter.

        Example:
            ```python
            policy.on_execution_starting()
            ```
        """
        with self._lock:
            self._executions += 1

    def should_replace(self) -> bool:
        """Return True once the threshold or the age limit is reached.

        Example:
            ```python
            due = policy.should_replace()
            ```
        """
        with self._lock:
            executions = self._executions
            age = time.monotonic() - self._installed_at
        return should_rotate(executions, age, self.threshold, self.max_age_seconds)

    def on_engine_replaced(self) -> None:
        """Zero the counter and restart the age clock.

        Example:
            ```python
            policy.on_engine_replaced()
            ```
        """
        with self._lock:
            self._executions = 0
            self._installed_at = time.monotonic()
