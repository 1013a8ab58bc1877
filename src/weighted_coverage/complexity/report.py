"""Precomputed complexity reports.

Two JSON shapes are accepted:

Normalized, one entry list per file::

    {"src/lib.rs": [{"kind": "function", "name": "parse", "start_line": 3,
                     "end_line": 20, "cyclomatic": 4, "cognitive": 6}]}

rust-code-analysis trees, a single file tree or a list of them, where the
root is the file itself and nested ``spaces`` are flattened depth-first::

    {"name": "src/lib.rs", "kind": "unit", "start_line": 1, "end_line": 40,
     "metrics": {"cyclomatic": {"sum": 7.0}, "cognitive": {"sum": 9.0}},
     "spaces": [...]}

A space is scored by its own complexity (``metrics.cyclomatic.cyclomatic``)
when the tree carries it, and by the ``sum`` over its subtree otherwise.

A report that matches neither shape is an input error. A malformed entry
only disqualifies its own file, which is then reported as ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from ..environment import normalize_path
from ..exceptions import InputFormatError
from ..logging_config import get_logger
from ..models import CodeSpace, SpaceKind

logger = get_logger(__name__)

REPORT_KIND = "complexity"


class _BadEntry(ValueError):
    """A single report entry could not be turned into a code space."""


def _line(entry: Mapping[str, Any], key: str) -> int:
    value = entry.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise _BadEntry(f"'{key}' must be an integer, got {value!r}")
    return value


def _complexity(value: Any, key: str) -> Union[int, float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _BadEntry(f"'{key}' must be a number, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _kind(entry: Mapping[str, Any]) -> SpaceKind:
    try:
        return SpaceKind.parse(str(entry.get("kind", "function")))
    except ValueError:
        raise _BadEntry(f"unknown space kind {entry.get('kind')!r}")


def _flat_space(entry: Any) -> CodeSpace:
    if not isinstance(entry, dict):
        raise _BadEntry("entry is not an object")
    return CodeSpace(
        kind=_kind(entry),
        name=str(entry.get("name", "")),
        start_line=_line(entry, "start_line"),
        end_line=_line(entry, "end_line"),
        cyclomatic=_complexity(entry.get("cyclomatic"), "cyclomatic"),
        cognitive=_complexity(entry.get("cognitive"), "cognitive"),
    )


def _tree_spaces(root: Mapping[str, Any]) -> List[CodeSpace]:
    spaces: List[CodeSpace] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if not isinstance(node, dict):
            raise _BadEntry("space is not an object")
        metrics = node.get("metrics")
        if not isinstance(metrics, dict):
            raise _BadEntry(f"space {node.get('name')!r} has no metrics")

        values = {}
        for key in ("cyclomatic", "cognitive"):
            metric = metrics.get(key)
            if not isinstance(metric, dict):
                raise _BadEntry(f"space {node.get('name')!r} has no {key} metric")
            # own value excludes nested spaces; older reports only carry the sum
            if key in metric:
                values[key] = _complexity(metric[key], f"{key}.{key}")
            else:
                values[key] = _complexity(metric.get("sum"), f"{key}.sum")

        spaces.append(
            CodeSpace(
                kind=_kind(node),
                name=str(node.get("name") or ""),
                start_line=_line(node, "start_line"),
                end_line=_line(node, "end_line"),
                cyclomatic=values["cyclomatic"],
                cognitive=values["cognitive"],
            )
        )
        children = node.get("spaces", [])
        if not isinstance(children, list):
            raise _BadEntry(f"space {node.get('name')!r}: 'spaces' is not a list")
        # Reversed so that children pop in document order
        stack.extend(reversed(children))
    return spaces


def _is_tree(node: Any) -> bool:
    return isinstance(node, dict) and "spaces" in node and "metrics" in node


@dataclass
class ComplexityReport:
    """Code spaces per file, read from a precomputed report.

    Attributes:
        spaces: Project-relative path -> code spaces in report order
        invalid: Project-relative path -> why its entry was rejected
    """

    spaces: Dict[str, List[CodeSpace]] = field(default_factory=dict)
    invalid: Dict[str, str] = field(default_factory=dict)

    @property
    def paths(self) -> List[str]:
        return sorted(set(self.spaces) | set(self.invalid))

    def _add(self, path: str, build) -> None:
        try:
            self.spaces[path] = build()
        except _BadEntry as e:
            logger.debug(f"Rejecting complexity entry for {path}: {e}")
            self.invalid[path] = f"invalid complexity entry: {e}"

    @classmethod
    def load(cls, report_path: Path, project_root: Path) -> "ComplexityReport":
        """Read a complexity report.

        Raises:
            InputFormatError: If the report cannot be read or has neither
                accepted shape
        """
        try:
            data = json.loads(report_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise InputFormatError(report_path, REPORT_KIND, f"cannot read: {e}")
        except json.JSONDecodeError as e:
            raise InputFormatError(report_path, REPORT_KIND, f"invalid JSON: {e}")

        report = cls.from_data(data, report_path, project_root)
        logger.info(
            f"Loaded complexity for {len(report.spaces)} files from {report_path}"
            + (f" ({len(report.invalid)} rejected)" if report.invalid else "")
        )
        return report

    @classmethod
    def from_data(cls, data: Any, report_path: Path, project_root: Path) -> "ComplexityReport":
        report = cls()

        if _is_tree(data):
            data = [data]

        if isinstance(data, list):
            for index, tree in enumerate(data):
                if not _is_tree(tree) or not isinstance(tree.get("name"), str):
                    raise InputFormatError(
                        report_path, REPORT_KIND, f"item {index} is not a named space tree"
                    )
                path = normalize_path(tree["name"], project_root)
                report._add(path, lambda tree=tree: _tree_spaces(tree))
            return report

        if isinstance(data, dict):
            for name, entries in data.items():
                path = normalize_path(name, project_root)
                if not isinstance(entries, list):
                    report.invalid[path] = "invalid complexity entry: not a list of spaces"
                    continue
                report._add(path, lambda entries=entries: [_flat_space(e) for e in entries])
            return report

        raise InputFormatError(
            report_path, REPORT_KIND, "expected an object keyed by path or a list of space trees"
        )
