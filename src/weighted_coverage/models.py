"""Data models for weighted-coverage.

Inputs (``CodeSpace``, ``CoverageTable``) are immutable once read. Fusion
produces ``FusedSpace`` / ``FileCoverage``; the metrics calculator and the
aggregator produce ``Metrics`` bundles at code-space, file and project level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Literal, Mapping, Optional

from .exceptions import EmptyResultError

if TYPE_CHECKING:
    from .metrics.thresholds import Thresholds

# path -> {line number (1-based) -> hit count}; non-executable lines are absent
CoverageTable = Mapping[str, Mapping[int, int]]

Mode = Literal["files", "functions"]
SortKey = Literal["wcc", "crap", "skunk"]

# Per-kind metric names, in output order
METRIC_FIELDS = ("complexity", "wcc", "crap", "skunk")


class SpaceKind(str, Enum):
    """Kind of scope a code space was measured over."""

    FUNCTION = "function"
    CLASS = "class"
    NAMESPACE = "namespace"
    UNIT = "unit"

    @classmethod
    def parse(cls, value: str) -> "SpaceKind":
        """Map provider-specific kind names onto the four supported kinds."""
        value = value.lower()
        if value in ("struct", "trait", "impl", "interface", "enum"):
            return cls.CLASS
        if value in ("module", "file"):
            return cls.UNIT
        return cls(value)


class Complexity(str, Enum):
    """Complexity metrics every score is computed for."""

    CYCLOMATIC = "cyclomatic"
    COGNITIVE = "cognitive"


@dataclass(frozen=True)
class CodeSpace:
    """A named scope with its line range and complexity values."""

    kind: SpaceKind
    name: str
    start_line: int
    end_line: int
    cyclomatic: int
    cognitive: int

    @property
    def total_lines(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def label(self) -> str:
        """Display name, unique inside a file: ``name(start, end)``."""
        return f"{self.name}({self.start_line}, {self.end_line})"

    def complexity(self, kind: Complexity) -> int:
        if kind is Complexity.CYCLOMATIC:
            return self.cyclomatic
        return self.cognitive

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True)
class FusedSpace:
    """A code space joined with the coverage of its lines."""

    space: CodeSpace
    covered_lines: int
    total_lines: int

    @property
    def coverage(self) -> float:
        if self.total_lines == 0:
            return 0.0
        return self.covered_lines / self.total_lines * 100.0


@dataclass(frozen=True)
class FileCoverage:
    """Line coverage over the whole line range of a file."""

    covered_lines: int
    total_lines: int

    @property
    def coverage(self) -> float:
        if self.total_lines == 0:
            return 0.0
        return self.covered_lines / self.total_lines * 100.0


@dataclass
class ComplexityMetrics:
    """Scores computed for one complexity kind."""

    complexity: float
    coverage: float
    wcc: float
    crap: float
    skunk: float
    is_complex: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "complexity": self.complexity,
            "coverage": self.coverage,
            "wcc": self.wcc,
            "crap": self.crap,
            "skunk": self.skunk,
            "isComplex": self.is_complex,
        }


@dataclass
class Metrics:
    """Coverage plus one metric pair per complexity kind."""

    coverage: float
    cyclomatic: ComplexityMetrics
    cognitive: ComplexityMetrics

    def for_kind(self, kind: Complexity) -> ComplexityMetrics:
        if kind is Complexity.CYCLOMATIC:
            return self.cyclomatic
        return self.cognitive

    def flatten(self) -> Dict[str, float]:
        """Numeric values keyed ``coverage`` and ``<kind>.<metric>``."""
        flat = {"coverage": self.coverage}
        for kind in Complexity:
            pair = self.for_kind(kind)
            for name in METRIC_FIELDS:
                flat[f"{kind.value}.{name}"] = getattr(pair, name)
        return flat

    @classmethod
    def from_flat(cls, flat: Mapping[str, float]) -> "Metrics":
        """Inverse of :meth:`flatten`; ``is_complex`` is left unset."""
        coverage = flat["coverage"]
        pairs = {
            kind: ComplexityMetrics(
                coverage=coverage,
                **{name: flat[f"{kind.value}.{name}"] for name in METRIC_FIELDS},
            )
            for kind in Complexity
        }
        return cls(
            coverage=coverage,
            cyclomatic=pairs[Complexity.CYCLOMATIC],
            cognitive=pairs[Complexity.COGNITIVE],
        )

    @classmethod
    def zero(cls) -> "Metrics":
        return cls.from_flat({key: 0.0 for key in cls.field_names()})

    @staticmethod
    def field_names() -> List[str]:
        names = ["coverage"]
        for kind in Complexity:
            names.extend(f"{kind.value}.{name}" for name in METRIC_FIELDS)
        return names

    def to_dict(self) -> Dict[str, object]:
        return {
            "coverage": self.coverage,
            "cyclomatic": self.cyclomatic.to_dict(),
            "cognitive": self.cognitive.to_dict(),
        }


@dataclass
class FunctionMetrics:
    """Metrics of a single code space, with its identity."""

    name: str
    kind: SpaceKind
    start_line: int
    end_line: int
    metrics: Metrics

    @property
    def label(self) -> str:
        return f"{self.name}({self.start_line}, {self.end_line})"

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.label,
            "kind": self.kind.value,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class FileMetrics:
    """Metrics of one file plus the raw sums the project roll-up needs.

    ``functions`` is always computed; whether it is shown depends on the
    output mode.
    """

    path: str
    metrics: Metrics
    covered_lines: int
    total_lines: int
    space_count: int
    complexity_sum: Dict[str, float] = field(default_factory=dict)
    wcc_weight: Dict[str, float] = field(default_factory=dict)
    functions: List[FunctionMetrics] = field(default_factory=list)

    def to_dict(self, include_functions: bool = False) -> Dict[str, object]:
        data: Dict[str, object] = {"name": self.path, "metrics": self.metrics.to_dict()}
        if include_functions:
            data["functions"] = [f.to_dict() for f in self.functions]
        return data


@dataclass(frozen=True)
class IgnoredFile:
    """A file excluded from every aggregate, with the reason why."""

    path: str
    reason: str


@dataclass(frozen=True)
class FileResult:
    """Outcome of one scheduled file: metrics or an ignored entry."""

    path: str
    metrics: Optional[FileMetrics] = None
    ignored: Optional[IgnoredFile] = None

    @property
    def is_ignored(self) -> bool:
        return self.ignored is not None


@dataclass
class ProjectMetrics:
    """Project-level roll-up.

    ``min_files`` / ``max_files`` map each flattened metric name to the file
    that produced the extreme value.
    """

    total: Metrics
    min: Metrics
    max: Metrics
    average: Metrics
    min_files: Dict[str, str] = field(default_factory=dict)
    max_files: Dict[str, str] = field(default_factory=dict)
    failed: bool = False

    @classmethod
    def empty(cls) -> "ProjectMetrics":
        """Sentinel for an analysis where every file was ignored."""
        return cls(
            total=Metrics.zero(),
            min=Metrics.zero(),
            max=Metrics.zero(),
            average=Metrics.zero(),
            failed=True,
        )

    def to_dict(self) -> Dict[str, object]:
        if self.failed:
            return {"failed": True}
        return {
            "total": self.total.to_dict(),
            "min": self.min.to_dict(),
            "max": self.max.to_dict(),
            "average": self.average.to_dict(),
            "minFiles": dict(self.min_files),
            "maxFiles": dict(self.max_files),
            "failed": False,
        }


@dataclass
class AnalysisResult:
    """Final, sorted and classified model handed to the formatters."""

    project_path: str
    project: ProjectMetrics
    files: List[FileMetrics]
    ignored_files: List[IgnoredFile]
    thresholds: "Thresholds"
    mode: Mode = "files"
    sort_by: SortKey = "wcc"

    @property
    def failed(self) -> bool:
        return self.project.failed

    def complex_files(self, kind: Complexity) -> List[str]:
        return [f.path for f in self.files if f.metrics.for_kind(kind).is_complex]

    def raise_for_failure(self) -> None:
        """Raise ``EmptyResultError`` when no file could be analyzed."""
        if self.failed:
            raise EmptyResultError(len(self.ignored_files), project=self.project_path)
