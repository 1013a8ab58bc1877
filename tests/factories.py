"""Builders for code spaces, hit tables and on-disk reports used across tests."""

import json

from weighted_coverage.models import CodeSpace, SpaceKind


def make_space(
    start,
    end,
    cyclomatic=1,
    cognitive=None,
    name="f",
    kind=SpaceKind.FUNCTION,
):
    """CodeSpace with cognitive complexity defaulting to the cyclomatic one."""
    return CodeSpace(
        kind=kind,
        name=name,
        start_line=start,
        end_line=end,
        cyclomatic=cyclomatic,
        cognitive=cyclomatic if cognitive is None else cognitive,
    )


def covered(start, end, hits=1):
    """Hit table with every line of ``start..end`` executed."""
    return {line: hits for line in range(start, end + 1)}


def uncovered(start, end):
    """Hit table with every line of ``start..end`` executable but never run."""
    return {line: 0 for line in range(start, end + 1)}


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
