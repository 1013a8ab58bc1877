"""Threshold derivation and classification.

The user supplies one triple ``(wcc %, cyclomatic, cognitive)``. CRAP and
Skunk thresholds are the scores a code space with that complexity would get
at a fixed 60% baseline coverage:

    crap_thr  = c^2 * 0.4^3 + c
    skunk_thr = (c / 0.6) * 0.4 + c

Classification is a pure function of a metric pair and these thresholds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict

from ..exceptions import InvalidConfigError
from ..models import Complexity, ComplexityMetrics, Metrics
from . import formulas

BASELINE_COVERAGE = 60.0


@dataclass(frozen=True)
class Thresholds:
    """Derived threshold set."""

    wcc: float = 60.0
    crap_cyclomatic: float = 16.4
    crap_cognitive: float = 16.4
    skunk_cyclomatic: float = 50.0 / 3.0
    skunk_cognitive: float = 50.0 / 3.0

    @classmethod
    def derive(
        cls, wcc: float = 60.0, cyclomatic: float = 10.0, cognitive: float = 10.0
    ) -> "Thresholds":
        """Derive the full threshold set from the user triple.

        Raises:
            InvalidConfigError: If a value is negative or not finite, or wcc is
                not a percentage
        """
        for key, value in (("wcc", wcc), ("cyclomatic", cyclomatic), ("cognitive", cognitive)):
            if not math.isfinite(value):
                raise InvalidConfigError(f"thresholds.{key}", value, "must be a finite number")
            if value < 0:
                raise InvalidConfigError(f"thresholds.{key}", value, "must be non-negative")
        if not 0.0 <= wcc <= 100.0:
            raise InvalidConfigError("thresholds.wcc", wcc, "must be between 0 and 100")

        return cls(
            wcc=wcc,
            crap_cyclomatic=formulas.crap(cyclomatic, BASELINE_COVERAGE),
            crap_cognitive=formulas.crap(cognitive, BASELINE_COVERAGE),
            skunk_cyclomatic=formulas.skunk(cyclomatic, BASELINE_COVERAGE),
            skunk_cognitive=formulas.skunk(cognitive, BASELINE_COVERAGE),
        )

    def crap_for(self, kind: Complexity) -> float:
        if kind is Complexity.CYCLOMATIC:
            return self.crap_cyclomatic
        return self.crap_cognitive

    def skunk_for(self, kind: Complexity) -> float:
        if kind is Complexity.CYCLOMATIC:
            return self.skunk_cyclomatic
        return self.skunk_cognitive

    def is_complex(self, wcc: float, crap: float, skunk: float, kind: Complexity) -> bool:
        return wcc < self.wcc or crap > self.crap_for(kind) or skunk > self.skunk_for(kind)

    def classify(self, pair: ComplexityMetrics, kind: Complexity) -> ComplexityMetrics:
        """Return a copy of ``pair`` with ``is_complex`` set."""
        return replace(pair, is_complex=self.is_complex(pair.wcc, pair.crap, pair.skunk, kind))

    def classify_metrics(self, metrics: Metrics) -> Metrics:
        return Metrics(
            coverage=metrics.coverage,
            cyclomatic=self.classify(metrics.cyclomatic, Complexity.CYCLOMATIC),
            cognitive=self.classify(metrics.cognitive, Complexity.COGNITIVE),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "wcc": self.wcc,
            "crapCyclomatic": self.crap_cyclomatic,
            "crapCognitive": self.crap_cognitive,
            "skunkCyclomatic": self.skunk_cyclomatic,
            "skunkCognitive": self.skunk_cognitive,
        }
