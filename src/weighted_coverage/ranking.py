"""Worst-first ordering of files and code spaces.

Runs once, after aggregation. Sorting builds new lists and never touches a
metric value. ``wcc`` sorts ascending (low weighted coverage is worst),
``crap`` and ``skunk`` descending; the path, or the name and start line of
a code space, break ties so repeated sorts give identical orders.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence, Tuple

from .exceptions import InvalidConfigError
from .models import Complexity, FileMetrics, FunctionMetrics, Metrics

SORT_KEYS = ("wcc", "crap", "skunk")


def _severity(metrics: Metrics, sort_by: str, complexity: Complexity) -> float:
    value = getattr(metrics.for_kind(complexity), sort_by)
    return value if sort_by == "wcc" else -value


def _check(sort_by: str) -> None:
    if sort_by not in SORT_KEYS:
        raise InvalidConfigError("sort", sort_by, f"must be one of: {', '.join(SORT_KEYS)}")


def sort_functions(
    functions: Sequence[FunctionMetrics],
    sort_by: str = "wcc",
    complexity: Complexity = Complexity.CYCLOMATIC,
) -> List[FunctionMetrics]:
    _check(sort_by)

    def key(f: FunctionMetrics) -> Tuple[float, str, int]:
        return (_severity(f.metrics, sort_by, complexity), f.name, f.start_line)

    return sorted(functions, key=key)


def sort_files(
    files: Sequence[FileMetrics],
    sort_by: str = "wcc",
    complexity: Complexity = Complexity.CYCLOMATIC,
) -> List[FileMetrics]:
    """Sort files worst-first, and each file's code spaces the same way.

    Args:
        files: File metrics in any order
        sort_by: One of ``wcc``, ``crap``, ``skunk``
        complexity: Which metric pair provides the sort value

    Returns:
        New list of (shallow-copied) file metrics

    Raises:
        InvalidConfigError: If ``sort_by`` is not a known metric
    """
    _check(sort_by)
    ordered = sorted(files, key=lambda f: (_severity(f.metrics, sort_by, complexity), f.path))
    return [
        replace(f, functions=sort_functions(f.functions, sort_by, complexity)) for f in ordered
    ]
