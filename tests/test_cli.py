from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from gsr import cli


def test_cli_run_arithmetic(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["run", "1 + 1"])
    output = capsys.readouterr().out
    assert code == 0
    assert "Result" in output
    assert "2" in output


def test_cli_run_with_params(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["run", "name.upper()", "--params", '{"name": "ada"}'])
    output = capsys.readouterr().out
    assert code == 0
    assert '"ADA"' in output


def test_cli_run_script_error_is_reported_as_result(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["run", "raise ValueError('boom')"])
    output = capsys.readouterr().out
    assert code == 0
    assert "Script Error" in output
    assert "boom" in output


def test_cli_run_bad_params_fails(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["run", "1", "--params", "not-json"])
    output = capsys.readouterr().out
    assert code == 2
    assert "Error parsing JSON parameter map" in output


def test_cli_run_with_graph_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    graph_file = tmp_path / "graph.json"
    graph_file.write_text(json.dumps({"vertices": [{"id": 1, "name": "ada"}]}), encoding="utf-8")
    code = cli.main(["run", "[v.properties['name'] for v in g.V()]", "--graph", str(graph_file)])
    output = capsys.readouterr().out
    assert code == 0
    assert '"ada"' in output


def test_cli_run_with_unknown_engine_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings_file = tmp_path / "runner.toml"
    settings_file.write_text('[runner]\nengine_name = "nope"\n', encoding="utf-8")
    code = cli.main(["run", "1", "--settings", str(settings_file)])
    output = capsys.readouterr().out
    assert code == 2
    assert "No script engine registered" in output


def test_cli_engines(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["engines"])
    output = capsys.readouterr().out
    assert code == 0
    assert "python" in output


def test_cli_top_level_help_examples(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["--help"])
    output = capsys.readouterr().out
    assert exc.value.code == 0
    assert "Quick Examples:" in output
    assert "python -m gsr engines" in output


def test_cli_missing_command_exits_with_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2
    assert "Error:" in capsys.readouterr().out


def test_cli_print_help_writes_to_requested_stream(capsys: pytest.CaptureFixture[str]) -> None:
    parser = cli.build_parser()
    buffer = io.StringIO()
    parser.print_help(file=buffer)
    output = capsys.readouterr().out
    assert output == ""
    help_text = buffer.getvalue()
    assert "Usage:" in help_text
    assert "graph-script-runner CLI" in help_text
