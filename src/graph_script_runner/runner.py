from __future__ import annotations

import threading

from .graph import GraphStore
from .results import NormalizedResult
from .service import ScriptExecutionService, build_service
from .settings import RunnerSettings

_DEFAULT_SERVICE: ScriptExecutionService | None = None
_DEFAULT_SERVICE_LOCK = threading.Lock()


def _resolve_settings(settings: RunnerSettings | None, settings_file: str | None) -> RunnerSettings:
    """Resolve the effective settings object for a service.

    Example:
        ```python
        settings = _resolve_settings(None, "/tmp/runner.toml")
        ```
    """
    if settings is not None and settings_file is not None:
        raise ValueError("Provide either 'settings' or 'settings_file', not both")
    if settings is None and settings_file is not None:
        return RunnerSettings.from_file(settings_file)
    if settings is None:
        return RunnerSettings()
    if settings.config_path is not None:
        return RunnerSettings.from_file(settings.config_path)
    return settings


def create_service(
    settings: RunnerSettings | None = None,
    settings_file: str | None = None,
) -> ScriptExecutionService:
    """Create a standalone execution service with its own engine.

    Example:
        ```python
        service = create_service(settings_file="/tmp/runner.toml")
        ```
    """
    return build_service(_resolve_settings(settings, settings_file))


def default_service() -> ScriptExecutionService:
    """Return the process-wide service, building it on first use.

    Example:
        ```python
        service = default_service()
        ```
    """
    global _DEFAULT_SERVICE
    service = _DEFAULT_SERVICE
    if service is None:
        with _DEFAULT_SERVICE_LOCK:
            if _DEFAULT_SERVICE is None:
                _DEFAULT_SERVICE = build_service()
            service = _DEFAULT_SERVICE
    return service


def execute_script(
    graph: GraphStore,
    script: str,
    params: str | None = None,
    *,
    service: ScriptExecutionService | None = None,
) -> NormalizedResult:
    """Execute a graph script and return its normalized result.

    Example:
        ```python
        from graph_script_runner import InMemoryGraph, execute_script
        res = execute_script(InMemoryGraph(), "1 + 1")
        assert res.to_jsonable() == 2
        ```
    """
    if not script or not script.strip():
        raise ValueError("execute_script requires a non-empty 'script'")
    resolved = service if service is not None else default_service()
    return resolved.execute(graph, script, params)
