from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def test_make_test_target_runs_lint_type_and_pytest() -> None:
    makefile = (_project_root() / "Makefile").read_text(encoding="utf-8")
    start = makefile.index("test:\n")
    end = makefile.index("\n\nlint:\n")
    block = makefile[start:end]

    assert "uv run --extra dev ruff check ." in block
    assert "uv run --extra dev mypy" in block
    assert "uv run --extra dev pytest" in block


def test_make_declares_project_targets() -> None:
    makefile = (_project_root() / "Makefile").read_text(encoding="utf-8")

    for target in ("install", "test", "lint", "typecheck"):
        assert f"\n{target}:\n" in makefile
    assert "uv sync --extra dev" in makefile
