from __future__ import annotations

import logging
from typing import Any

from .converter import ResultConverter
from .execution.manager import EngineManager
from .execution.policy import CountingReplacementPolicy
from .graph import GraphAdapter, GraphStore
from .params import parse_json_object
from .results import ErrorResult, NormalizedResult
from .settings import RunnerSettings

logger = logging.getLogger(__name__)


class ScriptExecutionService:
    """Evaluate one script request against a graph and normalize its result.

    Failing scripts come back as an `ErrorResult`. Malformed params raise
    ParameterParseError and a missing engine raises ConfigurationError.

    Example:
        ```python
        service = build_service(RunnerSettings())
        res = service.execute(InMemoryGraph(), "1 + 1")
        ```
    """

    def __init__(
        self,
        manager: EngineManager,
        converter: ResultConverter | None = None,
        *,
        graph_variable: str = "g",
    ) -> None:
        """Wire the engine manager and converter.

        Example:
            ```python
            service = ScriptExecutionService(EngineManager("python"), ResultConverter())
            ```
        """
        self.manager = manager
        self.converter = converter if converter is not None else ResultConverter()
        self.graph_variable = graph_variable

    def execute(self, graph: GraphStore, script: str, params: str | None = None) -> NormalizedResult:
        """Run a script with `g` bound to the graph plus any JSON params.

        Example:
            ```python
            res = service.execute(graph, "name", params='{"name": "ada"}')
            ```
        """
        self.manager.on_execution_starting()
        bindings = self.create_bindings(graph, params)
        engine = self.manager.get_engine()
        logger.debug("Evaluating script with %s (%d chars)", type(engine).__name__, len(script))
        outcome = engine.evaluate(script, bindings)
        if not outcome.ok:
            return ErrorResult(outcome.error or "Script evaluation failed")
        return self.converter.convert(outcome.value)

    def create_bindings(self, graph: GraphStore, params: str | None) -> dict[str, Any]:
        """Bind the graph adapter first, then merge caller params over it.

        Example:
            ```python
            bindings = service.create_bindings(graph, '{"limit": 3}')
            ```
        """
        bindings: dict[str, Any] = {self.graph_variable: GraphAdapter(graph)}
        extra = parse_json_object(params)
        if extra:
            logger.debug("Binding script parameters: %s", ", ".join(sorted(extra)))
        bindings.update(extra)
        return bindings

    def get_representation(self, data: Any) -> NormalizedResult:
        """Normalize an arbitrary value with this service's converter.

        Example:
            ```python
            res = service.get_representation([1, 2, 3])
            ```
        """
        return self.converter.convert(data)


def build_service(settings: RunnerSettings | None = None) -> ScriptExecutionService:
    """Build policy, engine manager, converter and service from settings.

    Example:
        ```python
        service = build_service(RunnerSettings.from_file("/tmp/runner.toml"))
        ```
    """
    resolved = settings if settings is not None else RunnerSettings()
    policy = CountingReplacementPolicy(
        resolved.replacement_threshold,
        max_age_seconds=resolved.max_engine_age_seconds,
    )
    manager = EngineManager(resolved.engine_name, policy=policy)
    converter = ResultConverter(max_items=resolved.max_result_items)
    return ScriptExecutionService(manager, converter, graph_variable=resolved.graph_variable)
