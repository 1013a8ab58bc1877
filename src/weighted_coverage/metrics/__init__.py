"""Scores, threshold derivation and classification."""

from .calculator import MetricsCalculator
from .formulas import (
    SKUNK_COMPLEXITY_FACTOR,
    WCC_COMPLEXITY_THRESHOLD,
    coverage_percentage,
    crap,
    skunk,
    wcc,
)
from .thresholds import BASELINE_COVERAGE, Thresholds

__all__ = [
    "MetricsCalculator",
    "Thresholds",
    "BASELINE_COVERAGE",
    "SKUNK_COMPLEXITY_FACTOR",
    "WCC_COMPLEXITY_THRESHOLD",
    "coverage_percentage",
    "crap",
    "skunk",
    "wcc",
]
