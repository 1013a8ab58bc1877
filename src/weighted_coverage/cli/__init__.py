"""CLI entry point."""

import typer

app = typer.Typer(
    name="weighted-coverage",
    help="Weighted code coverage - fuse test coverage with code complexity",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command to register it
from .analyze import main as _main  # noqa: F401, E402
