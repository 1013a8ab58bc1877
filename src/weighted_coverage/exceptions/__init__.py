"""Exception hierarchy for weighted-coverage."""

from .analysis import EmptyResultError, InputFormatError, PerFileError
from .base import WeightedCoverageError
from .config import (
    ConfigError,
    InvalidConfigError,
    InvalidPathError,
    MissingCoverageError,
)

__all__ = [
    "WeightedCoverageError",
    "ConfigError",
    "InvalidConfigError",
    "InvalidPathError",
    "MissingCoverageError",
    "InputFormatError",
    "PerFileError",
    "EmptyResultError",
]
