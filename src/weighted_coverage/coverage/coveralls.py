"""Adapter for grcov's coveralls JSON format.

    {"source_files": [{"name": "src/lib.rs", "coverage": [null, 3, 0, ...]}]}

Index ``i`` of ``coverage`` is line ``i + 1``; ``null`` marks a line that
needs no coverage.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ..environment import normalize_path
from ..exceptions import InputFormatError
from .base import CoverageAdapter, check_hit, merge_hits


class CoverallsAdapter(CoverageAdapter):
    """Coveralls source-file list."""

    name = "coveralls"

    def parse(
        self, data: Any, report_path: Path, project_root: Path
    ) -> Dict[str, Dict[int, int]]:
        if not isinstance(data, dict) or not isinstance(data.get("source_files"), list):
            raise InputFormatError(report_path, self.name, "missing 'source_files' list")

        table: Dict[str, Dict[int, int]] = {}
        for index, entry in enumerate(data["source_files"]):
            where = f"source_files[{index}]"
            if not isinstance(entry, dict):
                raise InputFormatError(report_path, self.name, f"{where} is not an object")
            name = entry.get("name")
            coverage = entry.get("coverage")
            if not isinstance(name, str) or not isinstance(coverage, list):
                raise InputFormatError(
                    report_path, self.name, f"{where} needs a 'name' and a 'coverage' list"
                )

            hits = {
                line: check_hit(value, report_path, self.name, f"{name}:{line}")
                for line, value in enumerate(coverage, start=1)
                if value is not None
            }
            merge_hits(table, normalize_path(name, project_root), hits)

        return table
