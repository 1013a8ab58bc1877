"""Configuration loading and management for weighted-coverage.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.weighted-coverage.toml)
    3. Project config (./weighted-coverage.toml)
    4. Explicit config file
    5. Environment variables (WCC_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(thresholds="70,12,12", mode="functions")
    >>> config.thresholds.wcc
    70.0
    >>> config.mode
    'functions'
"""

from __future__ import annotations

import math
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .coverage import COVERAGE_FORMATS
from .exceptions import InvalidConfigError
from .metrics.thresholds import Thresholds
from .models import Complexity, Mode, SortKey
from .ranking import SORT_KEYS

Verbosity = Literal["quiet", "normal", "verbose"]

MODES = ("files", "functions")
VERBOSITIES = ("quiet", "normal", "verbose")

GLOBAL_CONFIG_NAME = ".weighted-coverage.toml"
PROJECT_CONFIG_NAME = "weighted-coverage.toml"
ENV_PREFIX = "WCC_"


@dataclass(frozen=True)
class ThresholdConfig:
    """User threshold triple.

    Attributes:
        wcc: Minimum acceptable Wcc, in percent
        cyclomatic: Cyclomatic complexity regarded as acceptable
        cognitive: Cognitive complexity regarded as acceptable
    """

    wcc: float = 60.0
    cyclomatic: float = 10.0
    cognitive: float = 10.0

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        for key in ("wcc", "cyclomatic", "cognitive"):
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfigError(f"thresholds.{key}", value, "must be a number")
            if not math.isfinite(value):
                raise InvalidConfigError(f"thresholds.{key}", value, "must be a finite number")
            if value < 0:
                raise InvalidConfigError(f"thresholds.{key}", value, "must be non-negative")
        if not 0 <= self.wcc <= 100:
            raise InvalidConfigError("thresholds.wcc", self.wcc, "must be between 0 and 100")

    @classmethod
    def parse(cls, value: str) -> "ThresholdConfig":
        """Parse a ``"WCC,CYCLOMATIC,COGNITIVE"`` string.

        Raises:
            InvalidConfigError: If the string is not three comma-separated numbers
        """
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 3:
            raise InvalidConfigError(
                "thresholds", value, "expected three comma-separated values: WCC,CYCLOMATIC,COGNITIVE"
            )
        try:
            wcc, cyclomatic, cognitive = (float(part) for part in parts)
        except ValueError:
            raise InvalidConfigError("thresholds", value, "values must be numbers")
        return cls(wcc=wcc, cyclomatic=cyclomatic, cognitive=cognitive)

    def derive(self) -> Thresholds:
        """Full threshold set used for classification."""
        return Thresholds.derive(self.wcc, self.cyclomatic, self.cognitive)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        thresholds: Threshold triple (nested config)
        workers: Number of parallel workers (None = CPU count minus one)
        mode: ``files`` or ``functions``; only changes the output
        sort: Metric the output is ordered by, worst first
        sort_complexity: Complexity kind whose metrics drive the sort
        coverage_format: ``coveralls`` or ``covdir`` (None = chosen by caller)
        exclude_patterns: Glob patterns of source paths to leave out
        verbosity: Logging verbosity level
        allow_hidden_files: Include hidden files (starting with .)
        follow_symlinks: Follow symbolic links during discovery
    """

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    workers: Optional[int] = None
    mode: Mode = "files"
    sort: SortKey = "wcc"
    sort_complexity: str = Complexity.CYCLOMATIC.value
    coverage_format: Optional[str] = None
    exclude_patterns: list[str] = field(default_factory=list)
    verbosity: Verbosity = "normal"
    allow_hidden_files: bool = False
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.mode not in MODES:
            raise InvalidConfigError("mode", self.mode, f"must be one of: {', '.join(MODES)}")
        if self.sort not in SORT_KEYS:
            raise InvalidConfigError("sort", self.sort, f"must be one of: {', '.join(SORT_KEYS)}")
        kinds = [kind.value for kind in Complexity]
        if self.sort_complexity not in kinds:
            raise InvalidConfigError(
                "sort_complexity", self.sort_complexity, f"must be one of: {', '.join(kinds)}"
            )
        if self.coverage_format is not None and self.coverage_format not in COVERAGE_FORMATS:
            raise InvalidConfigError(
                "coverage_format",
                self.coverage_format,
                f"must be one of: {', '.join(COVERAGE_FORMATS)}",
            )
        if self.verbosity not in VERBOSITIES:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"must be one of: {', '.join(VERBOSITIES)}"
            )

    @property
    def complexity(self) -> Complexity:
        """Complexity kind used for sorting."""
        return Complexity(self.sort_complexity)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Configuration sources are merged in priority order (lowest to highest):
        1. Defaults (AnalysisConfig field defaults)
        2. Global config (~/.weighted-coverage.toml)
        3. Project config (./weighted-coverage.toml)
        4. Explicit config file (if config_file provided)
        5. Environment variables (WCC_* prefix)
        6. CLI overrides (kwargs)

    ``thresholds`` may be given as a ``[thresholds]`` table, a
    ``"WCC,CYC,COG"`` string or a ThresholdConfig. Overrides that are None
    are treated as not given.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        InvalidConfigError: If a config file is unreadable or a value is invalid
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise InvalidConfigError("config_file", config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({key: value for key, value in overrides.items() if value is not None})

    if "thresholds" in merged:
        merged["thresholds"] = _coerce_thresholds(merged["thresholds"])

    unknown = sorted(set(merged) - set(AnalysisConfig.__dataclass_fields__))
    if unknown:
        raise InvalidConfigError(unknown[0], merged[unknown[0]], "unknown configuration key")

    return AnalysisConfig(**merged)


def _coerce_thresholds(value: Any) -> ThresholdConfig:
    if isinstance(value, ThresholdConfig):
        return value
    if isinstance(value, str):
        return ThresholdConfig.parse(value)
    if isinstance(value, dict):
        try:
            return ThresholdConfig(**value)
        except TypeError as e:
            raise InvalidConfigError("thresholds", value, str(e))
    raise InvalidConfigError("thresholds", value, "expected a table or 'WCC,CYC,COG' string")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from WCC_* environment variables.

    Supported environment variables:
        WCC_THRESHOLDS: "WCC,CYCLOMATIC,COGNITIVE"
        WCC_WORKERS: int
        WCC_MODE: files/functions
        WCC_SORT: wcc/crap/skunk
        WCC_SORT_COMPLEXITY: cyclomatic/cognitive
        WCC_COVERAGE_FORMAT: coveralls/covdir
        WCC_VERBOSITY: quiet/normal/verbose
        WCC_ALLOW_HIDDEN_FILES: bool
        WCC_FOLLOW_SYMLINKS: bool

    Returns:
        Dict of field_name -> parsed_value for any WCC_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        if field_name == "thresholds":
            result[field_name] = env_value
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value, or None for types not settable from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # Lists (exclude_patterns) are config-file only
    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Mode)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        InvalidConfigError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidConfigError("config_file", path, str(e))
