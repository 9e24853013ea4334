from __future__ import annotations

import logging
import threading
from typing import Callable

from ..errors import ConfigurationError
from .engine import ScriptEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], "ScriptEngine | None"]

_LOCK = threading.Lock()
_FACTORIES: dict[str, EngineFactory] = {}


def register_engine(name: str, factory: EngineFactory, *, replace: bool = False) -> None:
    """Register a script engine factory under a logical name.

    Example:
        ```python
        register_engine("python", PythonScriptEngine)
        ```
    """
    cleaned = name.strip().lower()
    if not cleaned:
        raise ValueError("Engine name must be non-empty")
    with _LOCK:
        if cleaned in _FACTORIES and not replace:
            raise ValueError(f"Engine '{cleaned}' is already registered")
        _FACTORIES[cleaned] = factory


def unregister_engine(name: str) -> None:
    """Remove a registered engine factory if present.

    Example:
        ```python
        unregister_engine("python")
        ```
    """
    with _LOCK:
        _FACTORIES.pop(name.strip().lower(), None)


def available_engines() -> list[str]:
    """Return the sorted names of registered engines.

    Example:
        ```python
        names = available_engines()
        ```
    """
    with _LOCK:
        return sorted(_FACTORIES)


def create_engine(name: str) -> ScriptEngine:
    """Build a fresh engine instance by logical name.

    Example:
        ```python
        engine = create_engine("python")
        ```
    """
    key = name.strip().lower()
    with _LOCK:
        factory = _FACTORIES.get(key)
    if factory is None:
        raise ConfigurationError(
            f"No script engine registered under '{name}'. Available: {', '.join(available_engines()) or 'none'}"
        )
    try:
        engine = factory()
    except Exception as exc:
        raise ConfigurationError(f"Failed to create script engine '{name}': {exc}") from exc
    if engine is None:
        raise ConfigurationError(f"Script engine factory '{name}' returned no engine")
    logger.debug("Created script engine '%s' (%s)", key, type(engine).__name__)
    return engine
