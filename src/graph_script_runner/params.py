from __future__ import annotations

import json
from typing import Any

from .errors import ParameterParseError


def parse_json_object(text: str | None) -> dict[str, Any]:
    """Parse caller-supplied script parameters from JSON object text.

    Missing, empty or blank text yields no parameters.

    Example:
        ```python
        params = parse_json_object('{"name": "ada", "limit": 3}')
        ```
    """
    if text is None or not text.strip():
        return {}
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParameterParseError(f"Error parsing JSON parameter map: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ParameterParseError(
            f"Error parsing JSON parameter map: expected an object, got {type(parsed).__name__}"
        )
    return parsed
