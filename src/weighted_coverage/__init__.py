"""
weighted-coverage - coverage weighted by code complexity

Fuses a per-line coverage report with per-function complexity and scores
every file, code space and the project with Wcc, CRAP and Skunk.
"""

__version__ = "0.1.0"

from .api import analyze
from .models import AnalysisResult, CodeSpace, FileMetrics, Metrics, ProjectMetrics

__all__ = [
    "analyze",
    "AnalysisResult",
    "CodeSpace",
    "FileMetrics",
    "Metrics",
    "ProjectMetrics",
]
