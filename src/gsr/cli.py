from __future__ import annotations

import argparse
import json
import logging
from functools import partial
from typing import Any, Never, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich_argparse import RawTextRichHelpFormatter

from graph_script_runner import (
    ConfigurationError,
    ErrorResult,
    InMemoryGraph,
    ParameterParseError,
    create_service,
    execute_script,
)
from graph_script_runner.execution import available_engines

_CONSOLE = Console(no_color=False)


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m gsr")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(2)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for graph-script-runner.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m gsr",
        description=(
            "graph-script-runner CLI\n"
            "Evaluate graph scripts against an in-memory graph and print the\n"
            "normalized JSON result."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m gsr run \"1 + 1\"\n"
            "  python -m gsr run \"name.upper()\" --params '{\"name\": \"ada\"}'\n"
            "  python -m gsr run \"[v.properties['name'] for v in g.V()]\" --graph graph.json\n"
            "  python -m gsr engines"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging (engine lifecycle, parameter binding).",
    )

    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_RichArgumentParser,
    )

    run_cmd = sub.add_parser(
        "run",
        help="Evaluate one script.",
        description=(
            "Evaluate a script with 'g' bound to the graph.\n"
            "Script errors are printed as the result text, not as CLI failures."
        ),
        epilog=(
            "Examples:\n"
            "  python -m gsr run \"g\"\n"
            "  python -m gsr run \"limit * 2\" --params '{\"limit\": 21}'"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    run_cmd.add_argument("script", help="Script source to evaluate.")
    run_cmd.add_argument(
        "--params",
        help=(
            "JSON object of extra script variables.\n"
            "Example: --params '{\"name\": \"ada\"}'"
        ),
    )
    run_cmd.add_argument(
        "--graph",
        help=(
            "JSON file with {\"vertices\": [...], \"edges\": [...]}.\n"
            "Defaults to an empty graph."
        ),
    )
    run_cmd.add_argument(
        "--settings",
        help="TOML settings file with a [runner] table.",
    )

    sub.add_parser(
        "engines",
        help="List registered script engines.",
        description="Show the engine names available to the engine factory.",
        formatter_class=_HELP_FORMATTER,
    )

    return parser


def _configure_logging() -> None:
    """Route debug logging through Rich.

    Example:
        ```python
        _configure_logging()
        ```
    """
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=_CONSOLE, show_path=False)],
        force=True,
    )


def _print_engines(names: list[str]) -> None:
    """Render registered engines in a rich table.

    Example:
        ```python
        _print_engines(["python"])
        ```
    """
    table = Table(title="Script Engines")
    table.add_column("Name", style="cyan")
    for name in names:
        table.add_row(name)
    _CONSOLE.print(table)


def _run(args: argparse.Namespace) -> int:
    """Handle the `run` command.

    Example:
        ```python
        code = _run(build_parser().parse_args(["run", "1 + 1"]))
        ```
    """
    try:
        graph = InMemoryGraph.from_file(args.graph) if args.graph else InMemoryGraph()
        service = create_service(settings_file=args.settings)
        result = execute_script(graph, args.script, args.params, service=service)
    except (ConfigurationError, ParameterParseError, ValueError, OSError) as exc:
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {escape(str(exc))}", border_style="red"))
        return 2

    payload: Any = result.to_jsonable()
    rendered = Syntax(json.dumps(payload, indent=2, default=str), "json")
    if isinstance(result, ErrorResult):
        _CONSOLE.print(Panel.fit(rendered, title="Script Error", border_style="yellow"))
    else:
        _CONSOLE.print(Panel.fit(rendered, title="Result", border_style="green"))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `gsr` CLI command handler.

    Example:
        ```python
        code = main(["run", "1 + 1"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.verbose:
        _configure_logging()

    if args.command == "run":
        return _run(args)
    if args.command == "engines":
        _print_engines(available_engines())
        return 0

    parser.error("Unhandled command")
    return 2
