from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class EvaluationOutcome:
    """Result-type return of one script evaluation.

    Example:
        ```python
        out = EvaluationOutcome(ok=True, value=2)
        ```
    """

    ok: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, value: Any) -> "EvaluationOutcome":
        """Build a successful outcome.

        Example:
            ```python
            out = EvaluationOutcome.success([1, 2])
            ```
        """
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "EvaluationOutcome":
        """Build a failed outcome carrying the error message.

        Example:
            ```python
            out = EvaluationOutcome.failure("NameError: name 'x' is not defined")
            ```
        """
        return cls(ok=False, error=error)
