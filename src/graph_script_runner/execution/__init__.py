from .engine import ScriptEngine
from .manager import EngineManager
from .policy import CountingReplacementPolicy, ReplacementPolicy
from .python_engine import PythonScriptEngine
from .registry import available_engines, create_engine, register_engine, unregister_engine
from .types import EvaluationOutcome

__all__ = [
    "CountingReplacementPolicy",
    "EngineManager",
    "EvaluationOutcome",
    "PythonScriptEngine",
    "ReplacementPolicy",
    "ScriptEngine",
    "available_engines",
    "create_engine",
    "register_engine",
    "unregister_engine",
]
