"""Complexity providers: code spaces with cyclomatic and cognitive values."""

from .base import ComplexityProvider
from .python_ast import PythonComplexityProvider, cognitive_complexity, cyclomatic_complexity
from .report import ComplexityReport

__all__ = [
    "ComplexityProvider",
    "ComplexityReport",
    "PythonComplexityProvider",
    "cognitive_complexity",
    "cyclomatic_complexity",
]
