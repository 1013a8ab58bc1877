"""Source file discovery and path normalization.

Every path that reaches the engine is a POSIX path relative to the project
root, so coverage entries and code spaces of the same file meet under the
same key.

Example:
    >>> discover_source_files(Path("/path/to/project"), extensions=(".py",))
    ['pkg/__init__.py', 'pkg/core.py']
"""

from __future__ import annotations

import fnmatch
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence

from .exceptions import InvalidPathError
from .logging_config import get_logger

logger = get_logger(__name__)

# Directories that never hold project sources
SKIP_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".tox",
        ".nox",
        ".venv",
        "venv",
        "env",
        "node_modules",
        "build",
        "dist",
        "target",
        ".eggs",
    }
)


def validate_project_path(root: Path | str) -> Path:
    """Resolve the project root.

    Raises:
        InvalidPathError: If the path does not exist or is not a directory
    """
    root_path = Path(root).resolve()
    if not root_path.exists():
        raise InvalidPathError(root_path, "does not exist")
    if not root_path.is_dir():
        raise InvalidPathError(root_path, "is not a directory")
    return root_path


def normalize_path(name: str, project_root: Path) -> str:
    """Report file name -> project-relative POSIX path.

    Absolute names inside the project are made relative; anything else is
    kept as written, minus a leading ``./``.
    """
    name = name.replace("\\", "/")
    path = Path(name)
    if path.is_absolute():
        try:
            return path.resolve().relative_to(project_root.resolve()).as_posix()
        except ValueError:
            return PurePosixPath(name).as_posix()
    return PurePosixPath(name).as_posix().removeprefix("./")


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    """Match a relative POSIX path against glob patterns.

    A pattern matches the whole path or any single component of it, so
    ``tests`` excludes every ``tests`` directory and ``*_pb2.py`` every
    generated module.
    """
    parts = PurePosixPath(path).parts
    for pattern in patterns:
        if fnmatch.fnmatch(path, pattern):
            return True
        if any(fnmatch.fnmatch(part, pattern) for part in parts):
            return True
    return False


def discover_source_files(
    root: Path | str,
    extensions: Sequence[str],
    exclude_patterns: Sequence[str] = (),
    allow_hidden: bool = False,
    follow_symlinks: bool = False,
) -> List[str]:
    """Walk the project and list its source files.

    Args:
        root: Project root directory
        extensions: File suffixes to keep (e.g. ``(".py",)``)
        exclude_patterns: Glob patterns of paths to leave out
        allow_hidden: Include files and directories starting with ``.``
        follow_symlinks: Include symbolic links

    Returns:
        Sorted relative POSIX paths

    Raises:
        InvalidPathError: If root is missing or not a directory
    """
    root_path = validate_project_path(root)
    suffixes = {ext.lower() for ext in extensions}

    files: List[str] = []
    for item in root_path.rglob("*"):
        relative = item.relative_to(root_path)
        if any(part in SKIP_DIRS for part in relative.parts):
            continue
        if not allow_hidden and any(part.startswith(".") for part in relative.parts):
            continue
        if item.is_symlink() and not follow_symlinks:
            continue
        if not item.is_file() or item.suffix.lower() not in suffixes:
            continue

        path = relative.as_posix()
        if is_excluded(path, exclude_patterns):
            logger.debug(f"Excluded {path}")
            continue
        files.append(path)

    files.sort()
    logger.info(f"Discovered {len(files)} source files under {root_path}")
    return files
