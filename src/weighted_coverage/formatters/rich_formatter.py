"""Rich terminal formatter for weighted-coverage."""

import io
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import AnalysisResult, Complexity, ComplexityMetrics, FileMetrics, Metrics
from .base import BaseFormatter


def _status(pair: ComplexityMetrics) -> str:
    return "[red]complex[/red]" if pair.is_complex else "[green]ok[/green]"


def _wcc(pair: ComplexityMetrics, threshold: float) -> str:
    color = "red" if pair.wcc < threshold else "green"
    return f"[{color}]{pair.wcc:.2f}[/{color}]"


class RichFormatter(BaseFormatter):
    """Summary panel, per-file table and optional code space tables."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)

    def render(self, result: AnalysisResult) -> None:
        self._render_to(self.console, result)

    def format(self, result: AnalysisResult) -> str:
        console = Console(file=io.StringIO(), record=True, width=120, color_system=None)
        self._render_to(console, result)
        return console.export_text()

    def _render_to(self, console: Console, result: AnalysisResult) -> None:
        if result.failed:
            self._print_failed(console, result)
            self._print_ignored(console, result)
            return

        self._print_summary(console, result)
        self._print_files(console, result)
        if result.mode == "functions":
            for f in result.files:
                self._print_functions(console, result, f)
        self._print_ignored(console, result)

    # -- private helpers --

    def _print_failed(self, console: Console, result: AnalysisResult) -> None:
        text = (
            f"No file of [bold]{escape(result.project_path)}[/bold] could be analyzed "
            f"([yellow]{len(result.ignored_files)}[/yellow] ignored)"
        )
        console.print(
            Panel(text, title="[bold red]ANALYSIS FAILED[/bold red]", border_style="red", expand=False)
        )
        console.print()

    def _print_summary(self, console: Console, result: AnalysisResult) -> None:
        total = result.project.total
        thresholds = result.thresholds
        lines = [
            f"Project [bold]{escape(result.project_path)}[/bold]  |  "
            f"[bold]{len(result.files)}[/bold] files analyzed, "
            f"[yellow]{len(result.ignored_files)}[/yellow] ignored",
            f"Coverage: [blue]{total.coverage:.2f}%[/blue]",
        ]
        for kind in Complexity:
            pair = total.for_kind(kind)
            complex_count = len(result.complex_files(kind))
            lines.append(
                f"{kind.value.capitalize():10s}  Wcc {_wcc(pair, thresholds.wcc)}%  "
                f"CRAP {pair.crap:.2f}  Skunk {pair.skunk:.2f}  "
                f"complexity {pair.complexity:.2f}  "
                f"[red]{complex_count}[/red] complex files"
            )
        lines.append(
            f"[dim]Thresholds: wcc {thresholds.wcc:g}%, "
            f"crap {thresholds.crap_cyclomatic:.2f}/{thresholds.crap_cognitive:.2f}, "
            f"skunk {thresholds.skunk_cyclomatic:.2f}/{thresholds.skunk_cognitive:.2f} "
            f"(cyclomatic/cognitive)[/dim]"
        )
        console.print(Panel("\n".join(lines), title="[bold cyan]Summary[/bold cyan]", expand=False))
        console.print()

    def _metrics_table(self, title: str, first_column: str) -> Table:
        # names never wrap; the numeric columns give way and wrap their headers
        table = Table(title=title, expand=True)
        table.add_column(first_column, style="yellow", no_wrap=True, overflow="fold")
        table.add_column("Cov %", justify="right", min_width=6)
        for kind in ("Cyc", "Cog"):
            table.add_column(f"{kind} Wcc", justify="right", min_width=6)
            table.add_column(f"{kind} CRAP", justify="right", min_width=6)
            table.add_column(f"{kind} Skunk", justify="right", min_width=6)
            table.add_column(kind, justify="center", min_width=7)
        return table

    def _row(self, table: Table, name: str, metrics: Metrics, wcc_threshold: float) -> None:
        cells = [escape(name), f"{metrics.coverage:.2f}"]
        for kind in Complexity:
            pair = metrics.for_kind(kind)
            cells += [
                _wcc(pair, wcc_threshold),
                f"{pair.crap:.2f}",
                f"{pair.skunk:.2f}",
                _status(pair),
            ]
        table.add_row(*cells)

    def _print_files(self, console: Console, result: AnalysisResult) -> None:
        table = self._metrics_table(f"Files (worst {result.sort_by} first)", "File")
        for f in result.files:
            self._row(table, f.path, f.metrics, result.thresholds.wcc)
        console.print(table)
        console.print()

    def _print_functions(self, console: Console, result: AnalysisResult, f: FileMetrics) -> None:
        table = self._metrics_table(escape(f.path), "Code space")
        for space in f.functions:
            self._row(table, f"{space.label} [{space.kind.value}]", space.metrics, result.thresholds.wcc)
        console.print(table)
        console.print()

    def _print_ignored(self, console: Console, result: AnalysisResult) -> None:
        if not result.ignored_files:
            return
        console.print(f"[bold]Ignored files ({len(result.ignored_files)}):[/bold]")
        for ignored in result.ignored_files:
            console.print(f"  [dim]-[/dim] {escape(ignored.path)}  [dim]({escape(ignored.reason)})[/dim]")
        console.print()
