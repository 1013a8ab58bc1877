"""Composite coverage/complexity scores: Wcc, CRAP, Skunk.

Coverage arguments are percentages in [0, 100]; they are clamped before use
so a rounding artefact can never produce a negative uncovered ratio.
"""

# Covered lines owned by a code space above this complexity carry no weight
WCC_COMPLEXITY_THRESHOLD = 15.0

# Linear complexity factor of the Skunk score. Fixed, not user-configurable.
SKUNK_COMPLEXITY_FACTOR = 0.60


def _uncovered_ratio(coverage: float) -> float:
    ratio = min(max(coverage, 0.0), 100.0) / 100.0
    return 1.0 - ratio


def coverage_percentage(covered_lines: float, total_lines: float) -> float:
    """Covered / total as a percentage; 0 for an empty range."""
    if total_lines <= 0:
        return 0.0
    return covered_lines / total_lines * 100.0


def is_wcc_weighted(complexity: float) -> bool:
    """Whether covered lines of a space with this complexity count towards Wcc."""
    return complexity <= WCC_COMPLEXITY_THRESHOLD


def wcc(weight: float, total_lines: float) -> float:
    """Weighted code coverage: PLOC-weighted ratio of simple covered lines.

    Args:
        weight: Covered lines owned by code spaces at or below the threshold
        total_lines: Physical lines of the whole range

    Returns:
        Percentage in [0, coverage]
    """
    return coverage_percentage(weight, total_lines)


def crap(complexity: float, coverage: float) -> float:
    """CRAP = c^2 * (1 - r)^3 + c, with r the coverage ratio."""
    return complexity**2 * _uncovered_ratio(coverage) ** 3 + complexity


def skunk(complexity: float, coverage: float) -> float:
    """Skunk = (c / 0.60) * (1 - r) + c, with r the coverage ratio."""
    return (complexity / SKUNK_COMPLEXITY_FACTOR) * _uncovered_ratio(coverage) + complexity
