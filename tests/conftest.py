"""Shared test fixtures for weighted-coverage tests."""

import pytest
from factories import write_json

from weighted_coverage.metrics import MetricsCalculator, Thresholds


@pytest.fixture
def thresholds():
    """Default threshold set: 60% wcc, complexity 10 for both kinds."""
    return Thresholds.derive(60.0, 10.0, 10.0)


@pytest.fixture
def calculator(thresholds):
    return MetricsCalculator(thresholds)


@pytest.fixture
def two_file_project(tmp_path):
    """Project with one simple fully covered file and one complex half covered one.

    a.py: one function on lines 1-10, complexity 5, every line covered
    b.py: one function on lines 1-10, complexity 20, lines 1-5 covered
    """
    coveralls = {
        "source_files": [
            {"name": "a.py", "coverage": [1] * 10},
            {"name": "b.py", "coverage": [1] * 5 + [0] * 5},
        ]
    }
    complexity = {
        "a.py": [
            {
                "kind": "function",
                "name": "simple",
                "start_line": 1,
                "end_line": 10,
                "cyclomatic": 5,
                "cognitive": 5,
            }
        ],
        "b.py": [
            {
                "kind": "function",
                "name": "tangled",
                "start_line": 1,
                "end_line": 10,
                "cyclomatic": 20,
                "cognitive": 20,
            }
        ],
    }
    project = tmp_path / "project"
    project.mkdir()
    return {
        "project": project,
        "coveralls": write_json(tmp_path / "coveralls.json", coveralls),
        "complexity": write_json(tmp_path / "complexity.json", complexity),
    }


@pytest.fixture
def python_project(tmp_path):
    """Small Python package with a coveralls report for its two modules."""
    project = tmp_path / "pyproj"
    pkg = project / "pkg"
    pkg.mkdir(parents=True)

    (pkg / "__init__.py").write_text("", encoding="utf-8")
    (pkg / "core.py").write_text(
        "def add(a, b):\n"
        "    return a + b\n"
        "\n"
        "\n"
        "def sign(x):\n"
        "    if x > 0:\n"
        "        return 1\n"
        "    elif x < 0:\n"
        "        return -1\n"
        "    return 0\n",
        encoding="utf-8",
    )
    (pkg / "broken.py").write_text("def oops(:\n    pass\n", encoding="utf-8")

    coveralls = {
        "source_files": [
            {
                "name": "pkg/core.py",
                "coverage": [1, 1, None, None, 1, 1, 1, 1, 0, 0],
            },
            {"name": "pkg/broken.py", "coverage": [0, 0]},
        ]
    }
    return {
        "project": project,
        "coveralls": write_json(tmp_path / "coveralls.json", coveralls),
    }
