"""Project-level roll-up of per-file metrics.

``total`` is recomputed from aggregate inputs (summed line counts, mean
complexity over every code space, summed Wcc weights), exactly like a file
is computed from its code spaces. ``min`` / ``max`` / ``average`` are plain
pointwise statistics over the per-file values.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import numpy as np

from .logging_config import get_logger
from .metrics import formulas
from .metrics.thresholds import Thresholds
from .models import Complexity, ComplexityMetrics, FileMetrics, Metrics, ProjectMetrics

logger = get_logger(__name__)


class Aggregator:
    """Builds the ``ProjectMetrics`` of a run."""

    def __init__(self, thresholds: Thresholds) -> None:
        self.thresholds = thresholds

    def aggregate(self, files: Sequence[FileMetrics]) -> ProjectMetrics:
        """Roll per-file metrics up to project level.

        Args:
            files: Metrics of every non-ignored file, in any order

        Returns:
            ProjectMetrics, or the failed sentinel when ``files`` is empty
        """
        if not files:
            logger.warning("No analyzable files: analysis failed")
            return ProjectMetrics.empty()

        ordered = sorted(files, key=lambda f: f.path)
        total = self._total(ordered)
        (minimum, min_files), (maximum, max_files), average = self._pointwise(ordered)

        logger.info(
            f"Aggregated {len(ordered)} files: coverage={total.coverage:.2f}%, "
            f"wcc={total.cyclomatic.wcc:.2f}% (cyclomatic)"
        )

        return ProjectMetrics(
            total=total,
            min=self.thresholds.classify_metrics(minimum),
            max=self.thresholds.classify_metrics(maximum),
            average=self.thresholds.classify_metrics(average),
            min_files=min_files,
            max_files=max_files,
        )

    def _total(self, files: Sequence[FileMetrics]) -> Metrics:
        covered = sum(f.covered_lines for f in files)
        lines = sum(f.total_lines for f in files)
        spaces = sum(f.space_count for f in files)
        coverage = formulas.coverage_percentage(covered, lines)

        pairs: Dict[Complexity, ComplexityMetrics] = {}
        for kind in Complexity:
            complexity = sum(f.complexity_sum[kind.value] for f in files) / spaces
            weight = sum(f.wcc_weight[kind.value] for f in files)
            pairs[kind] = self.thresholds.classify(
                ComplexityMetrics(
                    complexity=complexity,
                    coverage=coverage,
                    wcc=formulas.wcc(weight, lines),
                    crap=formulas.crap(complexity, coverage),
                    skunk=formulas.skunk(complexity, coverage),
                ),
                kind,
            )

        return Metrics(
            coverage=coverage,
            cyclomatic=pairs[Complexity.CYCLOMATIC],
            cognitive=pairs[Complexity.COGNITIVE],
        )

    @staticmethod
    def _pointwise(
        files: Sequence[FileMetrics],
    ) -> Tuple[Tuple[Metrics, Dict[str, str]], Tuple[Metrics, Dict[str, str]], Metrics]:
        # argmin/argmax return the first occurrence, so ties keep the first
        # file in path order.
        names = Metrics.field_names()
        table = np.array([[f.metrics.flatten()[name] for name in names] for f in files])
        paths: List[str] = [f.path for f in files]

        min_idx = np.argmin(table, axis=0)
        max_idx = np.argmax(table, axis=0)
        mins = {name: float(table[min_idx[col], col]) for col, name in enumerate(names)}
        maxs = {name: float(table[max_idx[col], col]) for col, name in enumerate(names)}
        # Summation rounding must not push the mean outside [min, max]
        means = np.clip(table.mean(axis=0), table.min(axis=0), table.max(axis=0))
        avgs = {name: float(means[col]) for col, name in enumerate(names)}

        min_files = {name: paths[min_idx[col]] for col, name in enumerate(names)}
        max_files = {name: paths[max_idx[col]] for col, name in enumerate(names)}

        return (
            (Metrics.from_flat(mins), min_files),
            (Metrics.from_flat(maxs), max_files),
            Metrics.from_flat(avgs),
        )
