"""Parallel per-file fusion and scoring.

Every file is an independent task: fusion plus metrics against an immutable
``RunContext``. Tasks run on a thread pool with a bounded number of tasks in
flight; each result lands in a lock-guarded collector that is merged in
path order at the join, so output never depends on completion order.

Usage:
    context = RunContext(coverage=table, calculator=MetricsCalculator(thresholds))
    results = Scheduler(context, workers=4).run(tasks)
"""

from __future__ import annotations

import os
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from threading import BoundedSemaphore, Lock
from typing import Iterable, List, Optional, Tuple

from .exceptions import PerFileError
from .fusion import fuse
from .logging_config import get_logger
from .metrics.calculator import MetricsCalculator
from .models import CodeSpace, CoverageTable, FileResult, IgnoredFile

logger = get_logger(__name__)


def default_workers() -> int:
    """Available parallelism minus one, never less than one."""
    return max(1, (os.cpu_count() or 1) - 1)


@dataclass(frozen=True)
class RunContext:
    """Read-only state shared by every task of a run."""

    coverage: CoverageTable
    calculator: MetricsCalculator


@dataclass(frozen=True)
class FileTask:
    """One file to analyze, with the code spaces extracted for it."""

    path: str
    spaces: Tuple[CodeSpace, ...]


class ResultCollector:
    """Thread-safe sink for task results."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._results: List[FileResult] = []

    def add(self, result: FileResult) -> None:
        with self._lock:
            self._results.append(result)

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def merged(self) -> List[FileResult]:
        """All results, ordered by path."""
        with self._lock:
            return sorted(self._results, key=lambda r: r.path)


def process_file(task: FileTask, context: RunContext) -> FileResult:
    """Fuse and score one file; a per-file error degrades it to ignored."""
    try:
        fusion = fuse(task.path, task.spaces, context.coverage)
    except PerFileError as e:
        logger.debug(f"Ignoring {task.path}: {e.reason}")
        return FileResult(task.path, ignored=IgnoredFile(task.path, e.reason))

    if isinstance(fusion, IgnoredFile):
        logger.debug(f"Ignoring {task.path}: {fusion.reason}")
        return FileResult(task.path, ignored=fusion)

    return FileResult(task.path, metrics=context.calculator.file_metrics(fusion))


class Scheduler:
    """Runs file tasks on a bounded worker pool."""

    def __init__(self, context: RunContext, workers: Optional[int] = None) -> None:
        self.context = context
        self.workers = max(1, workers) if workers is not None else default_workers()

    def run(self, tasks: Iterable[FileTask]) -> List[FileResult]:
        """Process every task and return the results in path order.

        Unexpected exceptions raised by a task propagate once every
        submitted task has been waited for.
        """
        tasks = list(tasks)
        collector = ResultCollector()

        if self.workers == 1 or len(tasks) < 2:
            for task in tasks:
                collector.add(process_file(task, self.context))
            return collector.merged()

        logger.debug(f"Scheduling {len(tasks)} files on {self.workers} workers")
        slots = BoundedSemaphore(self.workers * 2)
        futures: List[Future] = []

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            for task in tasks:
                slots.acquire()
                future = executor.submit(process_file, task, self.context)
                future.add_done_callback(lambda _: slots.release())
                futures.append(future)

            for future in as_completed(futures):
                collector.add(future.result())

        return collector.merged()
