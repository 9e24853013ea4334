from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .execution.policy import DEFAULT_REPLACEMENT_THRESHOLD


def _default_settings_path() -> Path:
    """Return bundled default settings TOML path.

    Example:
        ```python
        path = _default_settings_path()
        ```
    """
    return Path(__file__).with_name("default_settings.toml")


def _read_settings_toml(path: Path) -> dict[str, Any]:
    """Read settings TOML and return the `[runner]` table (or the whole file).

    Example:
        ```python
        raw = _read_settings_toml(Path("/tmp/runner.toml"))
        ```
    """
    if not path.exists():
        return {
            "engine_name": "python",
            "replacement_threshold": DEFAULT_REPLACEMENT_THRESHOLD,
            "graph_variable": "g",
        }
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    settings_obj = raw.get("runner", raw)
    if not isinstance(settings_obj, dict):
        raise ValueError("Runner settings must be a TOML table")
    return settings_obj


def _optional_positive(value: Any, field_name: str) -> Any:
    """Validate an optional positive number setting.

    Example:
        ```python
        cap = _optional_positive(1000, "max_result_items")
        ```
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"'{field_name}' must be a positive number")
    return value


_DEFAULT_SETTINGS_RAW = _read_settings_toml(_default_settings_path())
DEFAULT_ENGINE_NAME = str(_DEFAULT_SETTINGS_RAW.get("engine_name", "python"))
DEFAULT_THRESHOLD = int(_DEFAULT_SETTINGS_RAW.get("replacement_threshold", DEFAULT_REPLACEMENT_THRESHOLD))
DEFAULT_GRAPH_VARIABLE = str(_DEFAULT_SETTINGS_RAW.get("graph_variable", "g"))
DEFAULT_MAX_ENGINE_AGE_SECONDS = _optional_positive(
    _DEFAULT_SETTINGS_RAW.get("max_engine_age_seconds"), "max_engine_age_seconds"
)
DEFAULT_MAX_RESULT_ITEMS = _optional_positive(
    _DEFAULT_SETTINGS_RAW.get("max_result_items"), "max_result_items"
)


@dataclass(slots=True)
class RunnerSettings:
    """Tunables for the script endpoint.

    Example:
        ```python
        settings = RunnerSettings(replacement_threshold=100, max_result_items=10_000)
        ```
    """

    engine_name: str = DEFAULT_ENGINE_NAME
    replacement_threshold: int = DEFAULT_THRESHOLD
    max_engine_age_seconds: float | None = DEFAULT_MAX_ENGINE_AGE_SECONDS
    graph_variable: str = DEFAULT_GRAPH_VARIABLE
    max_result_items: int | None = DEFAULT_MAX_RESULT_ITEMS
    config_path: str | None = None

    def __post_init__(self) -> None:
        """Validate values after dataclass initialization.

        Example:
            ```python
            RunnerSettings(replacement_threshold=1)
            ```
        """
        if not self.engine_name.strip():
            raise ValueError("engine_name must be non-empty")
        if self.replacement_threshold < 1:
            raise ValueError("replacement_threshold must be a positive integer")
        if not self.graph_variable.isidentifier() or self.graph_variable.startswith("_"):
            raise ValueError("graph_variable must be a public Python identifier")
        _optional_positive(self.max_engine_age_seconds, "max_engine_age_seconds")
        _optional_positive(self.max_result_items, "max_result_items")

    @classmethod
    def from_file(cls, config_path: str) -> "RunnerSettings":
        """Create settings from a TOML file.

        Example:
            ```python
            settings = RunnerSettings.from_file("/tmp/runner.toml")
            ```
        """
        path = Path(config_path)
        if not path.exists():
            raise ValueError(f"Settings file not found: {config_path}")
        raw = _read_settings_toml(path)
        max_items = raw.get("max_result_items", DEFAULT_MAX_RESULT_ITEMS)
        return cls(
            engine_name=str(raw.get("engine_name", DEFAULT_ENGINE_NAME)),
            replacement_threshold=int(raw.get("replacement_threshold", DEFAULT_THRESHOLD)),
            max_engine_age_seconds=_optional_positive(
                raw.get("max_engine_age_seconds", DEFAULT_MAX_ENGINE_AGE_SECONDS),
                "max_engine_age_seconds",
            ),
            graph_variable=str(raw.get("graph_variable", DEFAULT_GRAPH_VARIABLE)),
            max_result_items=None if max_items is None else int(max_items),
            config_path=config_path,
        )
