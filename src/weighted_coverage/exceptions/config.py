"""Configuration exceptions: thresholds, settings, paths, missing inputs.

Every error in this module is fatal and raised before any file is scheduled.
"""

from pathlib import Path
from typing import Any

from .base import WeightedCoverageError


class ConfigError(WeightedCoverageError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigError):
    """Raised when the project path is missing or unreadable."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class MissingCoverageError(ConfigError):
    """Raised when the coverage report cannot be found or read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot read coverage report: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
