from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

Scalar = Union[str, int, float, bool, None]


@dataclass(frozen=True, slots=True)
class ScalarResult:
    """A string, number, boolean or null value.

    Example:
        ```python
        res = ScalarResult(2)
        ```
    """

    value: Scalar

    def to_jsonable(self) -> Any:
        """Return the plain JSON value.

        Example:
            ```python
            assert ScalarResult("x").to_jsonable() == "x"
            ```
        """
        return self.value


@dataclass(frozen=True, slots=True)
class ErrorResult(ScalarResult):
    """Scalar string carrying the message of a failed script.

    Example:
        ```python
        res = ErrorResult("ZeroDivisionError: division by zero")
        ```
    """


@dataclass(frozen=True, slots=True)
class SequenceResult:
    """Ordered sequence of normalized results.

    Example:
        ```python
        res = SequenceResult((ScalarResult(1), ScalarResult(2)))
        ```
    """

    items: tuple["NormalizedResult", ...] = ()

    def to_jsonable(self) -> Any:
        """Return a JSON list of the converted items.

        Example:
            ```python
            assert SequenceResult((ScalarResult(1),)).to_jsonable() == [1]
            ```
        """
        return [item.to_jsonable() for item in self.items]


@dataclass(frozen=True, slots=True)
class MappingResult:
    """Mapping of string keys to normalized results.

    Example:
        ```python
        res = MappingResult({"a": ScalarResult(1)})
        ```
    """

    entries: dict[str, "NormalizedResult"] = field(default_factory=dict)

    def to_jsonable(self) -> Any:
        """Return a JSON object of the converted entries.

        Example:
            ```python
            assert MappingResult({"a": ScalarResult(1)}).to_jsonable() == {"a": 1}
            ```
        """
        return {key: value.to_jsonable() for key, value in self.entries.items()}


@dataclass(frozen=True, slots=True)
class EntityResult:
    """Normalized graph vertex or edge.

    `attributes` holds kind-specific fields such as an edge's label and
    endpoint ids.

    Example:
        ```python
        res = EntityResult(id=1, kind="vertex", properties={"name": ScalarResult("ada")})
        ```
    """

    id: Scalar
    kind: str
    properties: dict[str, "NormalizedResult"] = field(default_factory=dict)
    attributes: dict[str, Scalar] = field(default_factory=dict)

    def to_jsonable(self) -> Any:
        """Return the entity as a JSON object.

        Example:
            ```python
            payload = EntityResult(id=1, kind="vertex").to_jsonable()
            ```
        """
        payload: dict[str, Any] = {"id": self.id, "kind": self.kind}
        payload.update(self.attributes)
        payload["properties"] = {key: value.to_jsonable() for key, value in self.properties.items()}
        return payload


NormalizedResult = Union[ScalarResult, SequenceResult, MappingResult, EntityResult]
