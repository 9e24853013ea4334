from __future__ import annotations

from typing import Any, Mapping, Protocol

from .types import EvaluationOutcome


class ScriptEngine(Protocol):
    def evaluate(self, script: str, bindings: Mapping[str, Any]) -> EvaluationOutcome:
        """Evaluate one script against its bindings and return the outcome.

        Example:
            ```python
            outcome = engine.evaluate("1 + 1", {"g": adapter})
            ```
        """
        ...
