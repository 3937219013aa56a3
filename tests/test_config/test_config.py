"""
Tests for supplement_recommender/config.py.

What we test
------------
load_config():
  - The committed config/default.toml loads with the documented defaults.
  - An explicit TOML path is honoured; a missing one raises.
  - local.toml next to the config file is deep-merged on top.
  - SUPPLEMENT_RECOMMENDER_* environment variables override TOML values.
  - Invalid values raise pydantic.ValidationError.

AppConfig / SourceConfig:
  - debug forces the DEBUG log level.
  - api_key is read from the named environment variable.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest
from pydantic import ValidationError

from supplement_recommender.config import (
    AppConfig,
    LoggingConfig,
    ScoringConfig,
    SourceConfig,
    load_config,
)

_ENV_VARS = (
    "SUPPLEMENT_RECOMMENDER_LOG_LEVEL",
    "SUPPLEMENT_RECOMMENDER_DEBUG",
    "SUPPLEMENT_RECOMMENDER_MIN_SCORE",
    "SUPPLEMENT_RECOMMENDER_CATALOG",
    "SUPPLEMENT_RECOMMENDER_SOURCE_URL",
    "SUPPLEMENT_RECOMMENDER_SOURCE_KEY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _toml(tmp_path: Path, text: str, name: str = "config.toml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_default_toml(self):
        config = load_config()
        assert config.scoring.min_score_threshold == 60
        assert config.scoring.max_recommendations == 25
        assert config.scoring.average_window_days == 14
        assert config.scoring.negative_weight_penalty == 5
        assert config.data.catalog_file == "config/catalog/supplements.json"
        assert config.source.base_url is None

    def test_explicit_path(self, tmp_path):
        path = _toml(tmp_path, "[scoring]\nmin_score_threshold = 40\n")
        config = load_config(path)
        assert config.scoring.min_score_threshold == 40
        # untouched sections fall back to model defaults
        assert config.scoring.max_recommendations == 25
        assert config.logging.level == "INFO"

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_local_toml_merged(self, tmp_path):
        path = _toml(tmp_path, "[scoring]\nmin_score_threshold = 40\nmax_recommendations = 10\n")
        _toml(tmp_path, "[scoring]\nmax_recommendations = 3\n", name="local.toml")
        config = load_config(path)
        assert config.scoring.min_score_threshold == 40
        assert config.scoring.max_recommendations == 3

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = _toml(tmp_path, "[scoring]\nmin_score_threshold = 40\n")
        monkeypatch.setenv("SUPPLEMENT_RECOMMENDER_MIN_SCORE", "75")
        monkeypatch.setenv("SUPPLEMENT_RECOMMENDER_CATALOG", "/tmp/catalog.json")
        monkeypatch.setenv("SUPPLEMENT_RECOMMENDER_SOURCE_URL", "https://db.example.test/rest/v1")
        monkeypatch.setenv("SUPPLEMENT_RECOMMENDER_LOG_LEVEL", "warning")
        config = load_config(path)
        assert config.scoring.min_score_threshold == 75
        assert config.data.catalog_file == "/tmp/catalog.json"
        assert config.source.base_url == "https://db.example.test/rest/v1"
        assert config.logging.level == "WARNING"

    def test_env_debug_forces_debug_level(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SUPPLEMENT_RECOMMENDER_DEBUG", "true")
        config = load_config(_toml(tmp_path, ""))
        assert config.debug is True
        assert config.logging.level == "DEBUG"

    def test_toml_debug_overrides_toml_level(self, tmp_path):
        config = load_config(_toml(tmp_path, "debug = true\n[logging]\nlevel = \"ERROR\"\n"))
        assert config.logging.level == "DEBUG"
        assert config.logging.log_file == "data/logs/recommender.log"

    def test_invalid_value_raises(self, tmp_path):
        with pytest.raises(ValidationError):
            load_config(_toml(tmp_path, "[scoring]\nmin_score_threshold = 101\n"))


class TestConfigModels:
    def test_scoring_is_frozen(self):
        with pytest.raises(ValidationError):
            ScoringConfig().min_score_threshold = 10

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_score_threshold": -1},
            {"max_recommendations": 0},
            {"average_window_days": 0},
            {"negative_weight_penalty": -5},
            {"min_data_points": 0},
        ],
    )
    def test_scoring_rejects(self, kwargs):
        with pytest.raises(ValidationError):
            ScoringConfig(**kwargs)

    def test_zero_penalty_allowed(self):
        assert ScoringConfig(negative_weight_penalty=0).negative_weight_penalty == 0

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_debug_forces_debug_level(self):
        assert AppConfig(debug=True).logging.level == "DEBUG"

    def test_debug_overrides_explicit_logging_section(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            config = AppConfig(debug=True, logging=LoggingConfig(level="ERROR", json_format=True))
        assert config.logging.level == "DEBUG"
        assert config.logging.json_format is True

    def test_debug_off_keeps_level(self):
        assert AppConfig(logging={"level": "ERROR"}).logging.level == "ERROR"

    def test_source_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("MY_KEY", "abc")
        assert SourceConfig(api_key_env="MY_KEY").api_key == "abc"

    def test_source_api_key_missing(self):
        assert SourceConfig().api_key is None

    def test_source_rejects_bad_timeout(self):
        with pytest.raises(ValidationError):
            SourceConfig(timeout_seconds=0)
