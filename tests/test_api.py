"""End-to-end tests for weighted_coverage.analyze."""

import pytest
from factories import write_json

from weighted_coverage import analyze
from weighted_coverage.exceptions import (
    EmptyResultError,
    InputFormatError,
    InvalidConfigError,
    InvalidPathError,
    MissingCoverageError,
)
from weighted_coverage.models import Complexity


def _run(project, **overrides):
    return analyze(
        project["project"],
        project["coveralls"],
        complexity_report=project["complexity"],
        **overrides,
    )


class TestTwoFileProject:
    """Simple fully covered file next to a complex half covered one."""

    def test_file_metrics(self, two_file_project):
        result = _run(two_file_project)
        by_path = {f.path: f.metrics for f in result.files}

        simple = by_path["a.py"].cyclomatic
        assert by_path["a.py"].coverage == pytest.approx(100.0)
        assert simple.wcc == pytest.approx(100.0)
        assert simple.crap == pytest.approx(5.0)
        assert simple.skunk == pytest.approx(5.0)
        assert not simple.is_complex

        tangled = by_path["b.py"].cyclomatic
        assert by_path["b.py"].coverage == pytest.approx(50.0)
        assert tangled.wcc == 0.0
        assert tangled.crap == pytest.approx(70.0)
        assert tangled.skunk == pytest.approx(20 / 0.6 * 0.5 + 20)
        assert tangled.is_complex

    def test_project_metrics(self, two_file_project):
        project = _run(two_file_project).project
        assert not project.failed
        assert project.total.coverage == pytest.approx(75.0)
        assert project.total.cyclomatic.complexity == pytest.approx(12.5)
        assert project.total.cyclomatic.wcc == pytest.approx(50.0)
        assert project.total.cyclomatic.crap == pytest.approx(12.5**2 * 0.25**3 + 12.5)
        assert project.total.cyclomatic.skunk == pytest.approx(12.5 / 0.6 * 0.25 + 12.5)
        assert project.average.cyclomatic.crap == pytest.approx(37.5)
        assert project.min.cyclomatic.crap == pytest.approx(5.0)
        assert project.max.cyclomatic.crap == pytest.approx(70.0)

    def test_complex_files(self, two_file_project):
        result = _run(two_file_project)
        assert result.complex_files(Complexity.CYCLOMATIC) == ["b.py"]
        assert result.complex_files(Complexity.COGNITIVE) == ["b.py"]
        assert result.ignored_files == []

    @pytest.mark.parametrize("sort", ["wcc", "crap", "skunk"])
    def test_worst_first(self, two_file_project, sort):
        result = _run(two_file_project, sort=sort)
        assert [f.path for f in result.files] == ["b.py", "a.py"]
        assert result.sort_by == sort

    def test_workers_do_not_change_result(self, two_file_project):
        one = _run(two_file_project, workers=1)
        many = _run(two_file_project, workers=4)
        assert one.files == many.files
        assert one.project == many.project

    def test_thresholds_override(self, two_file_project):
        result = _run(two_file_project, thresholds="0,100,100")
        assert result.thresholds.wcc == 0
        assert result.complex_files(Complexity.CYCLOMATIC) == []

    def test_uncovered_file_is_ignored(self, two_file_project, tmp_path):
        complexity = {
            "a.py": [{"name": "f", "start_line": 1, "end_line": 10, "cyclomatic": 5, "cognitive": 5}],
            "c.py": [{"name": "g", "start_line": 1, "end_line": 3, "cyclomatic": 1, "cognitive": 0}],
        }
        project = dict(two_file_project, complexity=write_json(tmp_path / "cx2.json", complexity))
        result = _run(project)
        assert [f.path for f in result.files] == ["a.py"]
        assert [(i.path, i.reason) for i in result.ignored_files] == [("c.py", "no coverage data")]
        assert result.project.total.coverage == pytest.approx(100.0)

    def test_covdir_input(self, two_file_project, tmp_path):
        covdir = write_json(
            tmp_path / "covdir.json",
            {
                "name": "",
                "children": {
                    "a.py": {"name": "a.py", "coverage": [1] * 10},
                    "b.py": {"name": "b.py", "coverage": [1] * 5 + [0] * 5},
                },
            },
        )
        via_covdir = analyze(
            two_file_project["project"],
            covdir,
            complexity_report=two_file_project["complexity"],
            coverage_format="covdir",
        )
        assert via_covdir.project == _run(two_file_project).project


class TestFailures:
    """Fatal errors and failed analyses."""

    def test_all_ignored(self, two_file_project, tmp_path):
        coveralls = write_json(tmp_path / "other.json", {"source_files": [{"name": "z.py", "coverage": [1]}]})
        result = _run(dict(two_file_project, coveralls=coveralls))
        assert result.failed
        assert result.files == []
        assert len(result.ignored_files) == 2
        with pytest.raises(EmptyResultError) as exc_info:
            result.raise_for_failure()
        assert exc_info.value.ignored == 2

    def test_missing_coverage(self, two_file_project, tmp_path):
        with pytest.raises(MissingCoverageError):
            _run(dict(two_file_project, coveralls=tmp_path / "missing.json"))

    def test_wrong_coverage_format(self, two_file_project):
        with pytest.raises(InputFormatError):
            _run(two_file_project, coverage_format="covdir")

    def test_bad_project_path(self, two_file_project, tmp_path):
        with pytest.raises(InvalidPathError):
            _run(dict(two_file_project, project=tmp_path / "nowhere"))

    def test_bad_thresholds(self, two_file_project):
        with pytest.raises(InvalidConfigError):
            _run(two_file_project, thresholds="60,10")


class TestPythonSources:
    """Complexity measured from Python sources."""

    def test_analyze(self, python_project):
        result = analyze(python_project["project"], python_project["coveralls"])
        assert [f.path for f in result.files] == ["pkg/core.py"]

        core = result.files[0]
        assert core.space_count == 3
        assert core.metrics.coverage == pytest.approx(60.0)
        assert core.metrics.cyclomatic.wcc == pytest.approx(60.0)
        assert core.metrics.cyclomatic.complexity == pytest.approx(5 / 3)
        assert {f.name for f in core.functions} == {"core.py", "add", "sign"}

    def test_ignored_reasons(self, python_project):
        result = analyze(python_project["project"], python_project["coveralls"])
        reasons = {i.path: i.reason for i in result.ignored_files}
        assert reasons["pkg/__init__.py"] == "no coverage data"
        assert reasons["pkg/broken.py"].startswith("syntax error")

    def test_exclude_patterns(self, python_project):
        result = analyze(
            python_project["project"],
            python_project["coveralls"],
            exclude_patterns=["core.py"],
        )
        assert result.failed


class TestLogging:
    """Optional log file."""

    def test_log_file_receives_records(self, two_file_project, tmp_path):
        log = tmp_path / "run.log"
        _run(two_file_project, log_file=log, verbose=True)
        text = log.read_text(encoding="utf-8")
        assert "Starting analysis" in text
        assert "Analysis complete" in text
