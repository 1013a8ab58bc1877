"""Per code space and per file scores computed from fused data."""

from __future__ import annotations

from typing import Dict, List

from ..fusion import FusionResult
from ..models import (
    Complexity,
    ComplexityMetrics,
    FileMetrics,
    FunctionMetrics,
    FusedSpace,
    Metrics,
)
from . import formulas
from .thresholds import Thresholds


class MetricsCalculator:
    """Computes classified Wcc / CRAP / Skunk for both complexity kinds."""

    def __init__(self, thresholds: Thresholds) -> None:
        self.thresholds = thresholds

    def pair(
        self, kind: Complexity, complexity: float, coverage: float, wcc: float
    ) -> ComplexityMetrics:
        """Build and classify the metric pair for one complexity kind."""
        return self.thresholds.classify(
            ComplexityMetrics(
                complexity=complexity,
                coverage=coverage,
                wcc=wcc,
                crap=formulas.crap(complexity, coverage),
                skunk=formulas.skunk(complexity, coverage),
            ),
            kind,
        )

    @staticmethod
    def wcc_weight(fusion: FusionResult, start: int, end: int, kind: Complexity) -> int:
        """Covered lines in ``start..end`` whose innermost space is simple.

        Lines outside every code space have no decision points and are
        weighted like simple code.
        """
        weight = 0
        for line in range(start, end + 1):
            if line not in fusion.covered:
                continue
            owner = fusion.owner_of(line)
            if owner is None or formulas.is_wcc_weighted(owner.complexity(kind)):
                weight += 1
        return weight

    def space_metrics(self, fusion: FusionResult, fused: FusedSpace) -> FunctionMetrics:
        space = fused.space
        coverage = fused.coverage
        pairs = {}
        for kind in Complexity:
            weight = self.wcc_weight(fusion, space.start_line, space.end_line, kind)
            pairs[kind] = self.pair(
                kind,
                float(space.complexity(kind)),
                coverage,
                formulas.wcc(weight, fused.total_lines),
            )
        return FunctionMetrics(
            name=space.name,
            kind=space.kind,
            start_line=space.start_line,
            end_line=space.end_line,
            metrics=Metrics(
                coverage=coverage,
                cyclomatic=pairs[Complexity.CYCLOMATIC],
                cognitive=pairs[Complexity.COGNITIVE],
            ),
        )

    def file_metrics(self, fusion: FusionResult) -> FileMetrics:
        """File scores: mean code-space complexity, whole-file coverage."""
        coverage = fusion.file.coverage
        count = len(fusion.spaces)
        complexity_sum: Dict[str, float] = {}
        wcc_weight: Dict[str, float] = {}
        pairs = {}

        for kind in Complexity:
            total = float(sum(f.space.complexity(kind) for f in fusion.spaces))
            weight = self.wcc_weight(fusion, fusion.first_line, fusion.last_line, kind)
            complexity_sum[kind.value] = total
            wcc_weight[kind.value] = float(weight)
            pairs[kind] = self.pair(
                kind,
                total / count,
                coverage,
                formulas.wcc(weight, fusion.file.total_lines),
            )

        functions: List[FunctionMetrics] = [
            self.space_metrics(fusion, fused) for fused in fusion.spaces
        ]

        return FileMetrics(
            path=fusion.path,
            metrics=Metrics(
                coverage=coverage,
                cyclomatic=pairs[Complexity.CYCLOMATIC],
                cognitive=pairs[Complexity.COGNITIVE],
            ),
            covered_lines=fusion.file.covered_lines,
            total_lines=fusion.file.total_lines,
            space_count=count,
            complexity_sum=complexity_sum,
            wcc_weight=wcc_weight,
            functions=functions,
        )
