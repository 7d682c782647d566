import logging
from enum import Enum
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from stickyfields.config import load_config
from stickyfields.core.analyze import analyze_paths, analyze_source
from stickyfields.models import AnalysisReport

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _render_text(report: AnalysisReport) -> None:
    for diag in report.diagnostics:
        location = f"{diag.path}:{diag.position.row}:{diag.position.column}"
        console.print(
            f"[yellow]{escape(location)}[/yellow]: [bold]{escape(diag.function)}[/bold]: {escape(diag.message)}",
            soft_wrap=True,
        )
    console.print()
    console.print(escape(report.summary.render()))


def check(
    paths: Annotated[list[str] | None, typer.Argument(help="Go files or directories to analyze.")] = None,
    code: Annotated[str | None, typer.Option(help="Go source string to analyze instead of paths.")] = None,
    include_methods: Annotated[
        bool,
        typer.Option(
            "--include-methods/--no-include-methods",
            envvar="STICKYFIELDS_INCLUDE_METHODS",
            help="Also check functions with receivers.",
        ),
    ] = False,
    output_format: Annotated[OutputFormat, typer.Option("--format", help="Report format.")] = OutputFormat.text,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Report converter functions that leave input or output fields untouched."""
    _configure_logging(verbose)
    config = load_config(include_methods)

    try:
        if code is not None:
            report = analyze_source(code, config)
        else:
            report = analyze_paths(paths or ["."], config)
    except (FileNotFoundError, ValueError) as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(2) from exc

    if output_format is OutputFormat.json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        _render_text(report)

    if report.summary.warnings > 0:
        raise typer.Exit(1)
