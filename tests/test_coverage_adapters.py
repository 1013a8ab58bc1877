"""Tests for the coveralls and covdir coverage adapters."""

import pytest
from factories import write_json

from weighted_coverage.coverage import CovdirAdapter, CoverallsAdapter, get_adapter
from weighted_coverage.exceptions import ConfigError, InputFormatError, MissingCoverageError


class TestRegistry:
    """get_adapter lookup."""

    def test_known(self):
        assert isinstance(get_adapter("coveralls"), CoverallsAdapter)
        assert isinstance(get_adapter("covdir"), CovdirAdapter)

    def test_unknown(self):
        with pytest.raises(ValueError, match="lcov"):
            get_adapter("lcov")


class TestCoveralls:
    """Coveralls source-file list."""

    def test_lines_are_one_based_and_nulls_dropped(self, tmp_path):
        report = write_json(
            tmp_path / "c.json",
            {"source_files": [{"name": "src/a.py", "coverage": [None, 3, 0, None, 1]}]},
        )
        table = CoverallsAdapter().load(report, tmp_path)
        assert table == {"src/a.py": {2: 3, 3: 0, 5: 1}}

    def test_duplicate_entries_summed(self, tmp_path):
        report = write_json(
            tmp_path / "c.json",
            {
                "source_files": [
                    {"name": "a.py", "coverage": [1, 0]},
                    {"name": "./a.py", "coverage": [2, 0, 4]},
                ]
            },
        )
        table = CoverallsAdapter().load(report, tmp_path)
        assert table == {"a.py": {1: 3, 2: 0, 3: 4}}

    def test_absolute_paths_made_relative(self, tmp_path):
        name = str(tmp_path / "pkg" / "mod.py")
        report = write_json(tmp_path / "c.json", {"source_files": [{"name": name, "coverage": [1]}]})
        assert list(CoverallsAdapter().load(report, tmp_path)) == ["pkg/mod.py"]

    def test_empty_list(self, tmp_path):
        report = write_json(tmp_path / "c.json", {"source_files": []})
        assert CoverallsAdapter().load(report, tmp_path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingCoverageError) as exc_info:
            CoverallsAdapter().load(tmp_path / "nope.json", tmp_path)
        assert isinstance(exc_info.value, ConfigError)
        assert "nope.json" in exc_info.value.details["path"]

    def test_not_json(self, tmp_path):
        report = tmp_path / "c.json"
        report.write_text("{not json", encoding="utf-8")
        with pytest.raises(InputFormatError, match="coveralls"):
            CoverallsAdapter().load(report, tmp_path)

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"files": []},
            {"source_files": [{"name": "a.py"}]},
            {"source_files": [{"coverage": [1]}]},
            {"source_files": ["a.py"]},
            {"source_files": [{"name": "a.py", "coverage": [1, "x"]}]},
            {"source_files": [{"name": "a.py", "coverage": [1.5]}]},
        ],
    )
    def test_wrong_shape(self, tmp_path, data):
        report = write_json(tmp_path / "c.json", data)
        with pytest.raises(InputFormatError):
            CoverallsAdapter().load(report, tmp_path)


class TestCovdir:
    """Covdir directory tree."""

    def _report(self, tmp_path):
        return write_json(
            tmp_path / "covdir.json",
            {
                "name": "",
                "coveragePercent": 60.0,
                "children": {
                    "src": {
                        "name": "src",
                        "children": {
                            "lib.rs": {
                                "name": "lib.rs",
                                "coverage": [-1, 2, 0, -1, 5],
                                "coveragePercent": 66.67,
                            },
                            "util": {
                                "name": "util",
                                "children": {
                                    "mod.rs": {"name": "mod.rs", "coverage": [1, 1]},
                                },
                            },
                        },
                    },
                    "main.rs": {"name": "main.rs", "coverage": [0]},
                },
            },
        )

    def test_paths_joined_without_root(self, tmp_path):
        table = CovdirAdapter().load(self._report(tmp_path), tmp_path)
        assert sorted(table) == ["main.rs", "src/lib.rs", "src/util/mod.rs"]

    def test_non_executable_dropped(self, tmp_path):
        table = CovdirAdapter().load(self._report(tmp_path), tmp_path)
        assert table["src/lib.rs"] == {2: 2, 3: 0, 5: 5}
        assert table["main.rs"] == {1: 0}

    def test_root_without_children(self, tmp_path):
        report = write_json(tmp_path / "covdir.json", {"name": "x", "coverage": [1]})
        with pytest.raises(InputFormatError, match="covdir"):
            CovdirAdapter().load(report, tmp_path)

    def test_bad_child(self, tmp_path):
        report = write_json(tmp_path / "covdir.json", {"children": {"a.rs": 3}})
        with pytest.raises(InputFormatError):
            CovdirAdapter().load(report, tmp_path)

    def test_bad_hit_count(self, tmp_path):
        report = write_json(
            tmp_path / "covdir.json", {"children": {"a.rs": {"name": "a.rs", "coverage": [None]}}}
        )
        with pytest.raises(InputFormatError):
            CovdirAdapter().load(report, tmp_path)

    def test_same_table_as_coveralls(self, tmp_path):
        """Both formats describing the same run normalize identically."""
        coveralls = write_json(
            tmp_path / "c.json",
            {"source_files": [{"name": "src/a.rs", "coverage": [None, 1, 0]}]},
        )
        covdir = write_json(
            tmp_path / "d.json",
            {
                "children": {
                    "src": {
                        "name": "src",
                        "children": {"a.rs": {"name": "a.rs", "coverage": [-1, 1, 0]}},
                    }
                }
            },
        )
        assert CoverallsAdapter().load(coveralls, tmp_path) == CovdirAdapter().load(covdir, tmp_path)
