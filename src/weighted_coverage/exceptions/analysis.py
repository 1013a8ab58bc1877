"""Analysis exceptions: malformed inputs, per-file failures, empty results."""

from pathlib import Path
from typing import Optional, Union

from .base import WeightedCoverageError


class InputFormatError(WeightedCoverageError):
    """Raised when a coverage or complexity report cannot be normalized."""

    def __init__(self, path: Union[Path, str], report_kind: str, reason: str):
        super().__init__(
            f"Malformed {report_kind} report: {path}",
            details={"path": str(path), "kind": report_kind, "reason": reason},
        )
        self.path = path
        self.report_kind = report_kind
        self.reason = reason


class PerFileError(WeightedCoverageError):
    """Raised when a single file cannot be fused.

    Recoverable: the scheduler turns it into an ignored file and keeps going.
    """

    def __init__(self, filepath: str, reason: str):
        super().__init__(
            f"Cannot analyze file: {filepath}",
            details={"filepath": filepath, "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class EmptyResultError(WeightedCoverageError):
    """Raised when every file of the project ended up ignored."""

    def __init__(self, ignored: int, project: Optional[str] = None):
        details = {"ignored_files": str(ignored)}
        if project is not None:
            details["project"] = project

        super().__init__("Analysis failed: no analyzable files", details=details)
        self.ignored = ignored
        self.project = project
