from pathlib import Path

import pytest

from graph_script_runner import RunnerSettings


def test_defaults_come_from_bundled_file() -> None:
    settings = RunnerSettings()
    assert settings.engine_name == "python"
    assert settings.replacement_threshold == 500
    assert settings.graph_variable == "g"
    assert settings.max_engine_age_seconds is None
    assert settings.max_result_items is None


def test_from_file_reads_runner_table(tmp_path: Path) -> None:
    settings_file = tmp_path / "runner.toml"
    settings_file.write_text(
        (
            "[runner]\n"
            "replacement_threshold = 25\n"
            "max_engine_age_seconds = 600\n"
            "graph_variable = \"graph\"\n"
            "max_result_items = 1000\n"
        ),
        encoding="utf-8",
    )
    settings = RunnerSettings.from_file(str(settings_file))
    assert settings.replacement_threshold == 25
    assert settings.max_engine_age_seconds == 600
    assert settings.graph_variable == "graph"
    assert settings.max_result_items == 1000
    assert settings.config_path == str(settings_file)


def test_from_file_accepts_top_level_keys(tmp_path: Path) -> None:
    settings_file = tmp_path / "runner.toml"
    settings_file.write_text("replacement_threshold = 3\n", encoding="utf-8")
    assert RunnerSettings.from_file(str(settings_file)).replacement_threshold == 3


def test_missing_file_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        RunnerSettings.from_file(str(tmp_path / "absent.toml"))


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"replacement_threshold": 0}, "replacement_threshold"),
        ({"graph_variable": "_g"}, "graph_variable"),
        ({"graph_variable": "not valid"}, "graph_variable"),
        ({"engine_name": " "}, "engine_name"),
        ({"max_result_items": 0}, "max_result_items"),
        ({"max_engine_age_seconds": -1}, "max_engine_age_seconds"),
    ],
)
def test_invalid_values_rejected(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        RunnerSettings(**kwargs)
