from __future__ import annotations

import logging
import threading
from typing import Callable

from ..errors import ConfigurationError
from .engine import ScriptEngine
from .policy import CountingReplacementPolicy, ReplacementPolicy
from .registry import create_engine

logger = logging.getLogger(__name__)


class EngineManager:
    """Own one script engine and rebuild it when the policy says so.

    The held engine is swapped with a single reference assignment. Engine
    construction runs outside any lock, so in-flight evaluations keep using
    the engine they were handed. Two racing replacements may both build an
    engine; the last one installed wins.

    Example:
        ```python
        manager = EngineManager("python", policy=CountingReplacementPolicy(500))
        engine = manager.get_engine()
        ```
    """

    def __init__(
        self,
        engine_name: str,
        *,
        policy: ReplacementPolicy | None = None,
        factory: Callable[[str], ScriptEngine] = create_engine,
    ) -> None:
        """Configure the engine name, policy and factory; no engine is built yet.

        Example:
            ```python
            manager = EngineManager("python", factory=lambda name: PythonScriptEngine())
            ```
        """
        self.engine_name = engine_name
        self.policy = policy if policy is not None else CountingReplacementPolicy()
        self._factory = factory
        self._engine: ScriptEngine | None = None
        self._generation_lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of engines installed so far.

        Example:
            ```python
            assert manager.generation == 0
            ```
        """
        with self._generation_lock:
            return self._generation

    def on_execution_starting(self) -> None:
        """Count an evaluation attempt toward engine rotation.

        Example:
            ```python
            manager.on_execution_starting()
            ```
        """
        self.policy.on_execution_starting()

    def get_engine(self) -> ScriptEngine:
        """Return a live engine, creating or replacing it when due.

        Raises ConfigurationError when the factory cannot produce an engine.

        Example:
            ```python
            engine = manager.get_engine()
            ```
        """
        engine = self._engine
        if engine is None:
            return self._install("created")
        if self.policy.should_replace():
            return self._install("replaced")
        return engine

    def reset(self) -> None:
        """Drop the held engine so the next call builds a fresh one.

        Example:
            ```python
            manager.reset()
            ```
        """
        self._engine = None

    def _install(self, reason: str) -> ScriptEngine:
        """Build a new engine, publish it and reset the policy.

        Example:
            ```python
            engine = manager._install("created")
            ```
        """
        try:
            engine = self._factory(self.engine_name)
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Failed to create script engine '{self.engine_name}': {exc}") from exc
        if engine is None:
            raise ConfigurationError(f"No script engine available for '{self.engine_name}'")
        self._engine = engine
        self.policy.on_engine_replaced()
        with self._generation_lock:
            self._generation += 1
            generation = self._generation
        logger.info("Script engine '%s' %s (generation %d)", self.engine_name, reason, generation)
        return engine
