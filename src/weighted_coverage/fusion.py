"""Fusion of code spaces with the per-line coverage table.

For one file, fusion intersects every code space's line range with the
hit counts of that file and derives:

- per code space: covered / total physical lines
- per file: covered / total lines over the whole file range, each line
  counted once even when nested spaces share it
- per line: the innermost code space owning it, used to weight Wcc

Lines missing from the coverage table count as uncovered. Inputs are only
read, never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple, Union

from .exceptions import PerFileError
from .logging_config import get_logger
from .models import CodeSpace, CoverageTable, FileCoverage, FusedSpace, IgnoredFile

logger = get_logger(__name__)

NO_OWNER = -1


@dataclass(frozen=True)
class FusionResult:
    """Fused view of a single file.

    Attributes:
        path: File path as keyed in the coverage table
        spaces: Fused code spaces, in provider order, degenerate ones dropped
        file: Line coverage over ``first_line..last_line``
        first_line: First line of the file range
        covered: Line numbers with a positive hit count inside the file range
        owners: For each line of the range (offset from ``first_line``) the
            index into ``spaces`` of its innermost code space, or ``NO_OWNER``
    """

    path: str
    spaces: Tuple[FusedSpace, ...]
    file: FileCoverage
    first_line: int
    covered: frozenset
    owners: Tuple[int, ...]

    @property
    def last_line(self) -> int:
        return self.first_line + len(self.owners) - 1

    def owner_of(self, line: int) -> Optional[CodeSpace]:
        """Innermost code space containing ``line``, if any."""
        offset = line - self.first_line
        if offset < 0 or offset >= len(self.owners):
            return None
        index = self.owners[offset]
        if index == NO_OWNER:
            return None
        return self.spaces[index].space


def _validate(path: str, space: CodeSpace) -> None:
    if space.start_line < 1:
        raise PerFileError(path, f"{space.label}: start line must be at least 1")
    if space.total_lines < 0:
        raise PerFileError(path, f"{space.label}: end line precedes start line")
    if space.cyclomatic < 0 or space.cognitive < 0:
        raise PerFileError(path, f"{space.label}: negative complexity")


def _count_covered(hits: Mapping[int, int], start: int, end: int) -> int:
    return sum(1 for line in range(start, end + 1) if hits.get(line, 0) > 0)


def _assign_owners(spaces: Sequence[CodeSpace], first_line: int, last_line: int) -> Tuple[int, ...]:
    # Paint ranges widest first so that inner spaces overwrite their parents;
    # equal widths keep provider order, so the later (deeper) one wins.
    owners = [NO_OWNER] * (last_line - first_line + 1)
    order = sorted(range(len(spaces)), key=lambda i: -spaces[i].total_lines)
    for index in order:
        space = spaces[index]
        for line in range(space.start_line, space.end_line + 1):
            owners[line - first_line] = index
    return tuple(owners)


def fuse(
    file_path: str,
    code_spaces: Sequence[CodeSpace],
    coverage_table: CoverageTable,
) -> Union[FusionResult, IgnoredFile]:
    """Fuse a file's code spaces with its coverage.

    Args:
        file_path: Path of the file, as keyed in ``coverage_table``
        code_spaces: Ordered code spaces of the file
        coverage_table: Normalized coverage of the whole project

    Returns:
        ``FusionResult``, or ``IgnoredFile`` when the file has no coverage
        entry or no usable code spaces

    Raises:
        PerFileError: If a code space has an inconsistent line range or a
            negative complexity
    """
    hits = coverage_table.get(file_path)
    if hits is None:
        return IgnoredFile(file_path, "no coverage data")

    kept = []
    for space in code_spaces:
        _validate(file_path, space)
        if space.total_lines == 0:
            logger.debug(f"{file_path}: dropping empty code space {space.label}")
            continue
        kept.append(space)

    if not kept:
        return IgnoredFile(file_path, "no code spaces")

    fused = tuple(
        FusedSpace(
            space=space,
            covered_lines=_count_covered(hits, space.start_line, space.end_line),
            total_lines=space.total_lines,
        )
        for space in kept
    )

    first_line = min(space.start_line for space in kept)
    last_line = max(space.end_line for space in kept)
    covered = frozenset(
        line for line, count in hits.items() if count > 0 and first_line <= line <= last_line
    )
    file_coverage = FileCoverage(
        covered_lines=len(covered),
        total_lines=last_line - first_line + 1,
    )

    logger.debug(
        f"{file_path}: {len(fused)} code spaces, "
        f"{file_coverage.covered_lines}/{file_coverage.total_lines} lines covered"
    )

    return FusionResult(
        path=file_path,
        spaces=fused,
        file=file_coverage,
        first_line=first_line,
        covered=covered,
        owners=_assign_owners(kept, first_line, last_line),
    )
