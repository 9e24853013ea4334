from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Mapping, Sequence, Set
from dataclasses import fields, is_dataclass
from typing import Any

from .graph import Edge, GraphElement
from .results import (
    EntityResult,
    MappingResult,
    NormalizedResult,
    ScalarResult,
    SequenceResult,
)

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bool, int, float)


class ResultConverter:
    """Map arbitrary script output onto normalized result shapes.

    Conversion never raises. Values that cannot be converted degrade to their
    textual form.

    Example:
        ```python
        converter = ResultConverter()
        res = converter.convert({"a": 1, "b": "x"})
        ```
    """

    def __init__(self, *, max_items: int | None = None) -> None:
        """Configure an optional cap on items drained from iterators.

        Example:
            ```python
            converter = ResultConverter(max_items=10_000)
            ```
        """
        if max_items is not None and max_items < 1:
            raise ValueError("max_items must be a positive integer")
        self.max_items = max_items

    def convert(self, raw: Any) -> NormalizedResult:
        """Convert one value, recursing into containers.

        Example:
            ```python
            assert converter.convert([1, "a"]).to_jsonable() == [1, "a"]
            ```
        """
        try:
            return self._convert(raw)
        except Exception as exc:
            logger.warning(
                "Falling back to text for %s result: %s: %s",
                type(raw).__name__,
                type(exc).__name__,
                exc,
            )
            return ScalarResult(_text(raw))

    def _convert(self, raw: Any) -> NormalizedResult:
        """Type-directed dispatch; the first matching shape wins.

        Example:
            ```python
            res = converter._convert(3)
            ```
        """
        if raw is None:
            return ScalarResult(None)
        if isinstance(raw, _SCALAR_TYPES):
            return ScalarResult(raw)
        if isinstance(raw, (bytes, bytearray)):
            return ScalarResult(bytes(raw).decode("utf-8", errors="replace"))
        if isinstance(raw, GraphElement):
            return self._convert_entity(raw)
        if isinstance(raw, Sequence):
            return SequenceResult(tuple(self.convert(item) for item in raw))
        if isinstance(raw, Set):
            return SequenceResult(tuple(self.convert(item) for item in sorted(raw, key=repr)))
        if isinstance(raw, Iterable) and not isinstance(raw, Mapping):
            return SequenceResult(tuple(self.convert(item) for item in self._drain(raw)))
        if isinstance(raw, Mapping):
            return MappingResult({str(key): self.convert(value) for key, value in raw.items()})
        return self._convert_object(raw)

    def _convert_entity(self, element: GraphElement) -> EntityResult:
        """Expose id, kind and properties of a vertex or edge.

        Example:
            ```python
            res = converter._convert_entity(Vertex(id=1, properties={"name": "ada"}))
            ```
        """
        attributes: dict[str, Any] = {}
        if isinstance(element, Edge):
            attributes = {
                "label": element.label,
                "out_vertex": _identifier(element.out_id),
                "in_vertex": _identifier(element.in_id),
            }
        return EntityResult(
            id=_identifier(element.id),
            kind=element.kind,
            properties={str(key): self.convert(value) for key, value in element.properties.items()},
            attributes=attributes,
        )

    def _drain(self, producer: Iterable[Any]) -> list[Any]:
        """Pull every item from a lazy producer, honouring `max_items`.

        Example:
            ```python
            items = converter._drain(iter(range(3)))
            ```
        """
        if self.max_items is None:
            return list(producer)
        items = list(itertools.islice(producer, self.max_items + 1))
        if len(items) > self.max_items:
            logger.warning("Result truncated to %d items", self.max_items)
            del items[self.max_items:]
        return items

    def _convert_object(self, raw: Any) -> NormalizedResult:
        """Best-effort mapping of an unrecognized object's visible fields.

        Example:
            ```python
            res = converter._convert_object(SimpleNamespace(a=1))
            ```
        """
        if is_dataclass(raw) and not isinstance(raw, type):
            visible = {f.name: getattr(raw, f.name) for f in fields(raw) if not f.name.startswith("_")}
        else:
            visible = {
                key: value
                for key, value in getattr(raw, "__dict__", {}).items()
                if not key.startswith("_")
            }
        if not visible:
            return ScalarResult(_text(raw))
        return MappingResult({key: self.convert(value) for key, value in visible.items()})


def _identifier(value: Any) -> Any:
    """Keep scalar ids as-is and stringify anything else.

    Example:
        ```python
        assert _identifier(uuid.UUID(int=1)) == "00000000-0000-0000-0000-000000000001"
        ```
    """
    if value is None or isinstance(value, _SCALAR_TYPES):
        return value
    return _text(value)


def _text(raw: Any) -> str:
    """Textual form of a value that never raises.

    Example:
        ```python
        assert _text(3) == "3"
        ```
    """
    try:
        return str(raw)
    except Exception:
        return object.__repr__(raw)
