from __future__ import annotations

from typing import Any, Mapping

import pytest

from graph_script_runner import (
    ConfigurationError,
    CountingReplacementPolicy,
    EngineManager,
    EntityResult,
    ErrorResult,
    InMemoryGraph,
    ParameterParseError,
    ResultConverter,
    RunnerSettings,
    ScalarResult,
    ScriptExecutionService,
    SequenceResult,
    build_service,
)
from graph_script_runner.execution import EvaluationOutcome


@pytest.fixture()
def graph() -> InMemoryGraph:
    return InMemoryGraph.from_dict(
        {
            "vertices": [{"id": 1, "name": "ada"}, {"id": 2, "name": "charles"}],
            "edges": [{"id": 3, "out": 1, "in": 2, "label": "knows"}],
        }
    )


@pytest.fixture()
def service() -> ScriptExecutionService:
    return build_service(RunnerSettings())


def test_simple_arithmetic(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    assert service.execute(graph, "1+1") == ScalarResult(2)


def test_graph_variable_does_not_throw(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    result = service.execute(graph, "g")
    assert isinstance(result, ScalarResult)
    assert result.value == "graphadapter[vertices:2, edges:1]"


def test_raising_script_returns_error_text(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    result = service.execute(graph, "raise Exception('boom')")
    assert isinstance(result, ErrorResult)
    assert isinstance(result, ScalarResult)
    assert "boom" in str(result.value)


def test_error_text_equals_engine_message(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    engine = service.manager.get_engine()
    expected = engine.evaluate("1 / 0", {}).error
    assert service.execute(graph, "1 / 0") == ErrorResult(expected)


def test_params_are_bound(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    result = service.execute(graph, "name", params='{"name": "ada"}')
    assert result == ScalarResult("ada")


def test_every_param_key_is_visible(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    result = service.execute(graph, "[a, b, c]", params='{"a": 1, "b": "two", "c": null}')
    assert result.to_jsonable() == [1, "two", None]


def test_empty_params_add_no_bindings(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    bindings = service.create_bindings(graph, "")
    assert list(bindings) == ["g"]


def test_params_can_shadow_graph_key(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    assert service.execute(graph, "g", params='{"g": 5}') == ScalarResult(5)


def test_malformed_params_raise(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    with pytest.raises(ParameterParseError):
        service.execute(graph, "1", params="not-json")


def test_vertices_come_back_as_entities(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    result = service.execute(graph, "g.V()")
    assert isinstance(result, SequenceResult)
    assert all(isinstance(item, EntityResult) for item in result.items)
    assert [item.to_jsonable()["properties"]["name"] for item in result.items] == ["ada", "charles"]


def test_traversal_script(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    script = "[v.properties['name'] for v in g.out(g.v(start), 'knows')]"
    assert service.execute(graph, script, params='{"start": 1}').to_jsonable() == ["charles"]


def test_mutation_script_changes_graph(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    result = service.execute(graph, "g.add_vertex(name=who)", params='{"who": "grace"}')
    assert isinstance(result, EntityResult)
    assert graph.get_vertex(result.id).properties == {"name": "grace"}


def test_failed_script_counts_toward_rotation(graph: InMemoryGraph) -> None:
    policy = CountingReplacementPolicy(threshold=2)
    service = ScriptExecutionService(EngineManager("python", policy=policy), ResultConverter())
    service.execute(graph, "1")
    service.execute(graph, "raise ValueError('x')")
    assert policy.executions == 1
    service.execute(graph, "raise ValueError('x')")
    assert service.manager.generation == 2


def test_malformed_params_still_count_toward_rotation(graph: InMemoryGraph) -> None:
    policy = CountingReplacementPolicy(threshold=100)
    service = ScriptExecutionService(EngineManager("python", policy=policy))
    with pytest.raises(ParameterParseError):
        service.execute(graph, "1", params="{")
    assert policy.executions == 1


def test_missing_engine_is_hard_failure(graph: InMemoryGraph) -> None:
    service = build_service(RunnerSettings(engine_name="not-installed"))
    with pytest.raises(ConfigurationError):
        service.execute(graph, "1")


def test_custom_graph_variable(graph: InMemoryGraph) -> None:
    service = build_service(RunnerSettings(graph_variable="graph"))
    assert service.execute(graph, "str(graph)").to_jsonable().startswith("graphadapter")


def test_result_cap_from_settings(graph: InMemoryGraph) -> None:
    service = build_service(RunnerSettings(max_result_items=1))
    assert service.execute(graph, "g.V()").to_jsonable()[0]["id"] == 1
    assert len(service.execute(graph, "g.V()").to_jsonable()) == 1


def test_engine_receives_bindings(graph: InMemoryGraph) -> None:
    class _RecordingEngine:
        def __init__(self) -> None:
            self.seen: dict[str, Any] = {}

        def evaluate(self, script: str, bindings: Mapping[str, Any]) -> EvaluationOutcome:
            self.seen = dict(bindings)
            return EvaluationOutcome.success(script)

    engine = _RecordingEngine()
    service = ScriptExecutionService(EngineManager("stub", factory=lambda name: engine))
    assert service.execute(graph, "echo", params='{"k": "v"}') == ScalarResult("echo")
    assert set(engine.seen) == {"g", "k"}


def test_get_representation(service: ScriptExecutionService) -> None:
    assert service.get_representation((1, "a")).to_jsonable() == [1, "a"]


def test_result_param_does_not_leak_as_output(service: ScriptExecutionService, graph: InMemoryGraph) -> None:
    result = service.execute(graph, "x = 1", params='{"result": "leaked"}')
    assert result == ScalarResult(None)
