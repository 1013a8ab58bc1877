"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional, Tuple

from rich.console import Console

console = Console(stderr=True)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FAILED = 2


def coverage_source(
    coveralls: Optional[Path], covdir: Optional[Path]
) -> Tuple[Optional[Path], Optional[str]]:
    """Pick the coverage report and its format from the two exclusive flags.

    Returns ``(None, None)`` when neither or both flags were given.
    """
    if (coveralls is None) == (covdir is None):
        return None, None
    if coveralls is not None:
        return coveralls, "coveralls"
    return covdir, "covdir"
