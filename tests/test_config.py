"""Tests for weighted_coverage.config module."""

import os

import pytest

from weighted_coverage.config import AnalysisConfig, ThresholdConfig, load_config
from weighted_coverage.exceptions import InvalidConfigError
from weighted_coverage.models import Complexity


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """No global/project config files or WCC_* variables leak into tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("WCC_"):
            monkeypatch.delenv(key)


class TestThresholdConfig:
    """The user threshold triple."""

    def test_defaults(self):
        assert ThresholdConfig() == ThresholdConfig(60.0, 10.0, 10.0)

    def test_parse(self):
        assert ThresholdConfig.parse("70, 12,8.5") == ThresholdConfig(70.0, 12.0, 8.5)

    @pytest.mark.parametrize("value", ["60,10", "60,10,10,1", "a,b,c", ""])
    def test_parse_invalid(self, value):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig.parse(value)

    @pytest.mark.parametrize("triple", [(-1, 10, 10), (60, -2, 10), (150, 10, 10)])
    def test_validation(self, triple):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig(*triple)

    @pytest.mark.parametrize("value", ["nan,10,10", "60,inf,10", "60,10,-inf", "inf,10,10"])
    def test_non_finite_rejected(self, value):
        """NaN and infinity would silently disable classification."""
        with pytest.raises(InvalidConfigError):
            load_config(thresholds=value)

    def test_derive(self):
        thresholds = ThresholdConfig().derive()
        assert thresholds.crap_cyclomatic == pytest.approx(16.4)


class TestAnalysisConfig:
    """Field validation."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.mode == "files"
        assert config.sort == "wcc"
        assert config.workers is None
        assert config.complexity is Complexity.CYCLOMATIC

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"workers": 0},
            {"mode": "lines"},
            {"sort": "coverage"},
            {"sort_complexity": "halstead"},
            {"coverage_format": "lcov"},
            {"verbosity": "loud"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidConfigError) as exc_info:
            AnalysisConfig(**kwargs)
        assert exc_info.value.key == next(iter(kwargs))


class TestLoadConfig:
    """Merging of config sources."""

    def test_defaults(self):
        assert load_config() == AnalysisConfig()

    def test_project_file(self, tmp_path):
        (tmp_path / "weighted-coverage.toml").write_text(
            'mode = "functions"\nexclude_patterns = ["tests"]\n\n[thresholds]\nwcc = 75\n',
            encoding="utf-8",
        )
        config = load_config()
        assert config.mode == "functions"
        assert config.exclude_patterns == ["tests"]
        assert config.thresholds == ThresholdConfig(75, 10, 10)

    def test_global_file_lowest(self, tmp_path):
        home = tmp_path / "home"
        home.mkdir()
        (home / ".weighted-coverage.toml").write_text('mode = "functions"\nsort = "crap"\n', encoding="utf-8")
        (tmp_path / "weighted-coverage.toml").write_text('sort = "skunk"\n', encoding="utf-8")
        config = load_config()
        assert config.mode == "functions"
        assert config.sort == "skunk"

    def test_explicit_file_and_overrides(self, tmp_path):
        explicit = tmp_path / "custom.toml"
        explicit.write_text('sort = "crap"\nworkers = 3\n', encoding="utf-8")
        config = load_config(config_file=explicit, workers=5, mode=None)
        assert config.sort == "crap"
        assert config.workers == 5
        assert config.mode == "files"

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("WCC_WORKERS", "2")
        monkeypatch.setenv("WCC_THRESHOLDS", "80,5,5")
        monkeypatch.setenv("WCC_FOLLOW_SYMLINKS", "yes")
        config = load_config()
        assert config.workers == 2
        assert config.thresholds == ThresholdConfig(80, 5, 5)
        assert config.follow_symlinks is True

    def test_override_beats_env(self, monkeypatch):
        monkeypatch.setenv("WCC_SORT", "crap")
        assert load_config(sort="skunk").sort == "skunk"

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("WCC_WORKERS", "many")
        with pytest.raises(InvalidConfigError, match="WCC_WORKERS"):
            load_config()

    def test_thresholds_string_override(self):
        assert load_config(thresholds="50,20,30").thresholds == ThresholdConfig(50, 20, 30)

    def test_verbosity_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"

    def test_unknown_key(self, tmp_path):
        (tmp_path / "weighted-coverage.toml").write_text("colour = 1\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "colour"

    def test_unknown_threshold_key(self, tmp_path):
        (tmp_path / "weighted-coverage.toml").write_text("[thresholds]\ncrap = 1\n", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_invalid_toml(self, tmp_path):
        (tmp_path / "weighted-coverage.toml").write_text("mode = \n", encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(InvalidConfigError):
            load_config(config_file=tmp_path / "missing.toml")
