"""Main analysis command."""

from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.markup import escape

from ..api import analyze
from ..exceptions import EmptyResultError, WeightedCoverageError
from ..formatters import FORMATS, get_formatter
from ..logging_config import get_logger
from ..ranking import SORT_KEYS
from . import app
from ._common import EXIT_ERROR, EXIT_FAILED, console, coverage_source

logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        from .. import __version__

        console.print(
            f"[bold cyan]weighted-coverage[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)


@app.command()
def main(
    project: Path = typer.Argument(
        ...,
        help="Root of the analyzed project",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    coveralls: Optional[Path] = typer.Option(
        None,
        "--coveralls",
        help="Coverage report in coveralls JSON format",
        dir_okay=False,
    ),
    covdir: Optional[Path] = typer.Option(
        None,
        "--covdir",
        help="Coverage report in covdir JSON format",
        dir_okay=False,
    ),
    complexity_report: Optional[Path] = typer.Option(
        None,
        "--complexity-report",
        help="Precomputed complexity JSON (default: measure Python sources)",
        dir_okay=False,
    ),
    thresholds: Optional[str] = typer.Option(
        None,
        "-t",
        "--thresholds",
        help="Thresholds as WCC,CYCLOMATIC,COGNITIVE (default: 60,10,10)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-j",
        "--jobs",
        help="Parallel workers (default: CPU count minus one)",
        min=1,
    ),
    mode: Optional[str] = typer.Option(
        None,
        "-m",
        "--mode",
        help="Report files only or files with their code spaces",
        click_type=click.Choice(["files", "functions"]),
    ),
    sort: Optional[str] = typer.Option(
        None,
        "-s",
        "--sort",
        help="Metric to sort by, worst first",
        click_type=click.Choice(list(SORT_KEYS)),
    ),
    sort_complexity: Optional[str] = typer.Option(
        None,
        "--sort-complexity",
        help="Complexity kind whose metrics drive the sort",
        click_type=click.Choice(["cyclomatic", "cognitive"]),
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        help="Glob pattern of source paths to leave out (repeatable)",
    ),
    output_format: str = typer.Option(
        "rich",
        "-f",
        "--format",
        help="Output format",
        click_type=click.Choice(list(FORMATS)),
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the report to a file instead of the terminal",
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Fuse a coverage report with code complexity and score every file.

    Computes Wcc (weighted code coverage), CRAP and Skunk for cyclomatic and
    cognitive complexity, per file, per code space and for the project.

    [bold cyan]Examples:[/bold cyan]

      weighted-coverage . --coveralls coveralls.json

      weighted-coverage . --covdir covdir.json -m functions -s crap

      weighted-coverage . --coveralls cov.json -t 70,12,12 -f json -o report.json
    """
    coverage_file, coverage_format = coverage_source(coveralls, covdir)
    if coverage_file is None:
        console.print("[red]Error:[/red] pass exactly one of --coveralls or --covdir")
        raise typer.Exit(EXIT_ERROR)

    overrides = {
        "thresholds": thresholds,
        "workers": workers,
        "mode": mode,
        "sort": sort,
        "sort_complexity": sort_complexity,
        "coverage_format": coverage_format,
        "exclude_patterns": exclude or None,
        "verbose": verbose,
        "quiet": quiet,
    }

    try:
        result = analyze(
            project,
            coverage_file,
            complexity_report=complexity_report,
            config_file=config,
            log_file=log_file,
            **overrides,
        )

        formatter = get_formatter(output_format)
        if output is not None:
            try:
                output.write_text(formatter.format(result), encoding="utf-8")
            except OSError as e:
                console.print(f"[red]Error:[/red] cannot write report: {escape(str(e))}")
                raise typer.Exit(EXIT_ERROR)
            if not quiet:
                console.print(f"Report written to [bold]{output}[/bold]")
        else:
            formatter.render(result)

        result.raise_for_failure()

    except EmptyResultError as e:
        logger.error(str(e))
        raise typer.Exit(EXIT_FAILED)

    except WeightedCoverageError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_ERROR)

    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_ERROR)

    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)
