"""Base interface for coverage report adapters.

An adapter turns one raw report format into the normalized
``CoverageTable``: POSIX paths relative to the project root mapped to
``{line: hits}``, with non-executable lines left out.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

from ..exceptions import InputFormatError, MissingCoverageError
from ..logging_config import get_logger

logger = get_logger(__name__)


def merge_hits(table: Dict[str, Dict[int, int]], path: str, hits: Dict[int, int]) -> None:
    """Add ``hits`` for ``path`` into ``table``, summing duplicated lines."""
    current = table.setdefault(path, {})
    for line, count in hits.items():
        current[line] = current.get(line, 0) + count


def check_hit(value: Any, report_path: Path, report_kind: str, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputFormatError(
            report_path, report_kind, f"{where}: hit count {value!r} is not an integer"
        )
    return value


class CoverageAdapter(ABC):
    """Abstract base class for coverage report formats."""

    name: str = ""

    def load(self, report_path: Path, project_root: Path) -> Dict[str, Dict[int, int]]:
        """Read and normalize a report.

        Raises:
            MissingCoverageError: If the report cannot be read
            InputFormatError: If the report is not valid for this format
        """
        try:
            raw = report_path.read_text(encoding="utf-8")
        except OSError as e:
            raise MissingCoverageError(report_path, str(e))

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InputFormatError(report_path, self.name, f"invalid JSON: {e}")

        table = self.parse(data, report_path, project_root)
        logger.info(f"Loaded {self.name} coverage for {len(table)} files from {report_path}")
        return table

    @abstractmethod
    def parse(
        self, data: Any, report_path: Path, project_root: Path
    ) -> Dict[str, Dict[int, int]]:
        """Normalize decoded report data."""
