from .converter import ResultConverter
from .errors import ConfigurationError, ParameterParseError, ScriptEvaluationError
from .execution import CountingReplacementPolicy, EngineManager, PythonScriptEngine
from .graph import Edge, GraphAdapter, InMemoryGraph, Vertex
from .results import (
    EntityResult,
    ErrorResult,
    MappingResult,
    NormalizedResult,
    ScalarResult,
    SequenceResult,
)
from .runner import create_service, execute_script
from .service import ScriptExecutionService, build_service
from .settings import RunnerSettings

__all__ = [
    "ConfigurationError",
    "CountingReplacementPolicy",
    "Edge",
    "EngineManager",
    "EntityResult",
    "ErrorResult",
    "GraphAdapter",
    "InMemoryGraph",
    "MappingResult",
    "NormalizedResult",
    "ParameterParseError",
    "PythonScriptEngine",
    "ResultConverter",
    "RunnerSettings",
    "ScalarResult",
    "ScriptEvaluationError",
    "ScriptExecutionService",
    "SequenceResult",
    "Vertex",
    "build_service",
    "create_service",
    "execute_script",
]
