from pathlib import Path

import pytest

from graph_script_runner import InMemoryGraph, RunnerSettings, ScalarResult, create_service, execute_script
from graph_script_runner import runner


def test_execute_script_with_default_service() -> None:
    assert execute_script(InMemoryGraph(), "1+1") == ScalarResult(2)


def test_default_service_is_shared() -> None:
    assert runner.default_service() is runner.default_service()


def test_execute_script_requires_script() -> None:
    with pytest.raises(ValueError, match="non-empty 'script'"):
        execute_script(InMemoryGraph(), "   ")


def test_execute_script_with_explicit_service() -> None:
    service = create_service(RunnerSettings(replacement_threshold=1))
    graph = InMemoryGraph()
    execute_script(graph, "1", service=service)
    execute_script(graph, "1", service=service)
    assert service.manager.generation == 2


def test_create_service_from_settings_file(tmp_path: Path) -> None:
    settings_file = tmp_path / "runner.toml"
    settings_file.write_text("[runner]\nreplacement_threshold = 7\n", encoding="utf-8")
    service = create_service(settings_file=str(settings_file))
    assert service.manager.policy.threshold == 7  # type: ignore[attr-defined]


def test_create_service_rejects_settings_and_file_together(tmp_path: Path) -> None:
    settings_file = tmp_path / "runner.toml"
    settings_file.write_text("[runner]\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Provide either 'settings' or 'settings_file'"):
        create_service(RunnerSettings(), settings_file=str(settings_file))
