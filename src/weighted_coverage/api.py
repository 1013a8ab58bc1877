"""Public API for weighted-coverage.

Example:
    >>> from weighted_coverage import analyze
    >>>
    >>> result = analyze("/path/to/project", "coveralls.json")
    >>> result.project.total.cyclomatic.wcc
    72.5
    >>>
    >>> # Precomputed complexity, custom thresholds
    >>> result = analyze(
    ...     "/path/to/project",
    ...     "covdir.json",
    ...     complexity_report="complexity.json",
    ...     coverage_format="covdir",
    ...     thresholds="70,12,12",
    ... )
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .aggregation import Aggregator
from .complexity import ComplexityReport, PythonComplexityProvider
from .config import AnalysisConfig, load_config
from .coverage import get_adapter
from .environment import discover_source_files, is_excluded, validate_project_path
from .exceptions import PerFileError
from .logging_config import get_logger, setup_logging
from .metrics import MetricsCalculator
from .models import AnalysisResult, CoverageTable, IgnoredFile
from .ranking import sort_files
from .scheduler import FileTask, RunContext, Scheduler

logger = get_logger(__name__)

DEFAULT_COVERAGE_FORMAT = "coveralls"


def _extract_python(
    root: Path, config: AnalysisConfig
) -> Tuple[List[FileTask], List[IgnoredFile]]:
    """Read and measure every Python source of the project."""
    provider = PythonComplexityProvider()
    paths = discover_source_files(
        root,
        extensions=provider.extensions,
        exclude_patterns=config.exclude_patterns,
        allow_hidden=config.allow_hidden_files,
        follow_symlinks=config.follow_symlinks,
    )

    tasks: List[FileTask] = []
    ignored: List[IgnoredFile] = []
    for path in paths:
        try:
            source = (root / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            ignored.append(IgnoredFile(path, f"cannot read source: {e}"))
            continue
        try:
            spaces = provider.extract(path, source)
        except PerFileError as e:
            ignored.append(IgnoredFile(path, e.reason))
            continue
        tasks.append(FileTask(path, tuple(spaces)))

    return tasks, ignored


def _from_report(
    report: ComplexityReport, exclude_patterns: Sequence[str]
) -> Tuple[List[FileTask], List[IgnoredFile]]:
    """Turn a loaded complexity report into tasks."""
    tasks: List[FileTask] = []
    ignored: List[IgnoredFile] = []
    for path in report.paths:
        if is_excluded(path, exclude_patterns):
            logger.debug(f"Excluded {path}")
            continue
        if path in report.invalid:
            ignored.append(IgnoredFile(path, report.invalid[path]))
            continue
        tasks.append(FileTask(path, tuple(report.spaces[path])))
    return tasks, ignored


def _log_uncovered_sources(coverage: CoverageTable, tasks: Sequence[FileTask]) -> None:
    known = {task.path for task in tasks}
    unmatched = [path for path in coverage if path not in known]
    if unmatched:
        logger.debug(
            f"{len(unmatched)} coverage entries have no complexity data, e.g. {unmatched[0]}"
        )


def analyze(
    project_path: str | Path,
    coverage_file: str | Path,
    complexity_report: Optional[str | Path] = None,
    config_file: Optional[Path] = None,
    log_file: Optional[str | Path] = None,
    **overrides,
) -> AnalysisResult:
    """Fuse coverage with complexity and score a project.

    Pipeline:
    1. Load configuration and derive thresholds
    2. Load the coverage report (fatal on error)
    3. Collect code spaces, from Python sources or a complexity report
    4. Fuse and score every file on the worker pool
    5. Aggregate to project level and sort worst-first

    Args:
        project_path: Root of the analyzed project
        coverage_file: Coveralls or covdir JSON report
        complexity_report: Optional precomputed complexity JSON; when absent
            Python sources under ``project_path`` are measured directly
        config_file: Optional explicit config file path
        log_file: Optional file that receives a copy of the log
        **overrides: Configuration overrides (e.g. thresholds="60,10,10",
            workers=4, mode="functions", verbose=True)

    Returns:
        AnalysisResult; ``result.failed`` is set when no file could be analyzed

    Raises:
        ConfigError: If configuration, the project path or the coverage
            report is invalid
        InputFormatError: If a report cannot be normalized
    """
    setup_logging(
        verbose=bool(overrides.get("verbose")),
        quiet=bool(overrides.get("quiet")),
        log_file=str(log_file) if log_file is not None else None,
    )

    config = load_config(config_file=config_file, **overrides)
    thresholds = config.thresholds.derive()
    logger.debug(f"Configuration loaded: {config}")

    root = validate_project_path(project_path)
    logger.info(f"Starting analysis of {root}")

    coverage_format = config.coverage_format or DEFAULT_COVERAGE_FORMAT
    coverage = get_adapter(coverage_format).load(Path(coverage_file), root)

    if complexity_report is not None:
        report = ComplexityReport.load(Path(complexity_report), root)
        tasks, ignored = _from_report(report, config.exclude_patterns)
    else:
        tasks, ignored = _extract_python(root, config)
    _log_uncovered_sources(coverage, tasks)

    calculator = MetricsCalculator(thresholds)
    scheduler = Scheduler(RunContext(coverage=coverage, calculator=calculator), config.workers)
    logger.info(f"Analyzing {len(tasks)} files on {scheduler.workers} workers")
    results = scheduler.run(tasks)

    files = [r.metrics for r in results if r.metrics is not None]
    ignored.extend(r.ignored for r in results if r.ignored is not None)
    ignored.sort(key=lambda i: i.path)

    project = Aggregator(thresholds).aggregate(files)

    logger.info(f"Analysis complete: {len(files)} files analyzed, {len(ignored)} ignored")

    return AnalysisResult(
        project_path=str(root),
        project=project,
        files=sort_files(files, config.sort, config.complexity),
        ignored_files=ignored,
        thresholds=thresholds,
        mode=config.mode,
        sort_by=config.sort,
    )
