"""Adapter for grcov's covdir JSON format.

Directories nest under ``children``; files are leaves carrying a
``coverage`` array where ``-1`` marks a line that needs no coverage. The
root node stands for the project itself, so its name is not part of any
path.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Tuple

from ..environment import normalize_path
from ..exceptions import InputFormatError
from ..logging_config import get_logger
from .base import CoverageAdapter, check_hit, merge_hits

logger = get_logger(__name__)


class CovdirAdapter(CoverageAdapter):
    """Covdir directory tree."""

    name = "covdir"

    def parse(
        self, data: Any, report_path: Path, project_root: Path
    ) -> Dict[str, Dict[int, int]]:
        if not isinstance(data, dict) or not isinstance(data.get("children"), dict):
            raise InputFormatError(report_path, self.name, "root node has no 'children' object")

        table: Dict[str, Dict[int, int]] = {}
        stack: List[Tuple[Any, PurePosixPath]] = [(data["children"], PurePosixPath())]

        while stack:
            children, prefix = stack.pop()
            for key, node in children.items():
                if not isinstance(node, dict):
                    raise InputFormatError(report_path, self.name, f"{prefix / key} is not an object")
                name = node.get("name", key)
                if not isinstance(name, str):
                    raise InputFormatError(report_path, self.name, f"{prefix / key} has no name")

                if "children" in node:
                    if not isinstance(node["children"], dict):
                        raise InputFormatError(
                            report_path, self.name, f"{prefix / name}: 'children' is not an object"
                        )
                    stack.append((node["children"], prefix / name))
                    continue

                coverage = node.get("coverage")
                if coverage is None:
                    logger.debug(f"covdir entry {prefix / name} has no line coverage, skipping")
                    continue
                if not isinstance(coverage, list):
                    raise InputFormatError(
                        report_path, self.name, f"{prefix / name}: 'coverage' is not a list"
                    )

                path = str(prefix / name)
                hits = {}
                for line, value in enumerate(coverage, start=1):
                    count = check_hit(value, report_path, self.name, f"{path}:{line}")
                    if count >= 0:
                        hits[line] = count
                merge_hits(table, normalize_path(path, project_root), hits)

        return table
