"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local secrets and env overrides (gitignored)
  4. Environment variables       : ``SUPPLEMENT_RECOMMENDER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Scoring functions receive a ``ScoringConfig`` value, never a process-wide
engine object; the CLI and the runner pass ``config.scoring`` explicitly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class ScoringConfig(BaseModel):
    """Parameters of one scoring run.

    ``negative_weight_penalty`` is the number of percentage points removed per
    weight unit of a matched negative condition.  ``min_data_points`` is the
    minimum number of tracked days before a rolling average counts.
    """

    model_config = ConfigDict(frozen=True)

    min_score_threshold: int = 60
    max_recommendations: int = 25
    average_window_days: int = 14
    negative_weight_penalty: int = 5
    min_data_points: int = 3

    @field_validator("min_score_threshold")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"min_score_threshold must be in [0, 100], got {v}.")
        return v

    @field_validator("max_recommendations", "average_window_days", "min_data_points")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be >= 1, got {v}.")
        return v

    @field_validator("negative_weight_penalty")
    @classmethod
    def validate_penalty(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"negative_weight_penalty must be >= 0, got {v}.")
        return v


class DataConfig(BaseModel):
    """Filesystem paths for the catalog, local user data and reports."""

    model_config = ConfigDict(frozen=True)

    catalog_file: str = "config/catalog/supplements.json"
    user_data_dir: str = "data/users"
    output_dir: str = "data/outputs/recommendations"


class SourceConfig(BaseModel):
    """REST user-data source settings.

    The API key itself is never stored in TOML; ``api_key_env`` names the
    environment variable (usually set through ``.env``) that holds it.
    """

    model_config = ConfigDict(frozen=True)

    base_url: Optional[str] = None
    api_key_env: str = "SUPPLEMENT_RECOMMENDER_SOURCE_KEY"
    timeout_seconds: float = 15.0
    max_concurrency: int = 4

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v

    @field_validator("max_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {v}.")
        return v

    @property
    def api_key(self) -> Optional[str]:
        """API key read from the environment, or ``None``."""
        return os.environ.get(self.api_key_env) or None


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/recommender.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration: the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    scoring: ScoringConfig = ScoringConfig()
    data: DataConfig = DataConfig()
    source: SourceConfig = SourceConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False

    @model_validator(mode="before")
    @classmethod
    def force_debug_logging(cls, data: Any) -> Any:
        """``debug = true`` forces the DEBUG log level."""
        if not isinstance(data, dict) or data.get("debug") is not True:
            return data
        log = data.get("logging")
        if isinstance(log, LoggingConfig):
            log = log.model_copy(update={"level": "DEBUG"})
        else:
            log = {**(log or {}), "level": "DEBUG"}
        return {**data, "logging": log}


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent

_ENV_PREFIX = "SUPPLEMENT_RECOMMENDER_"


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply SUPPLEMENT_RECOMMENDER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SUPPLEMENT_RECOMMENDER_* env vars to the raw config dict.

    Supported overrides:
      SUPPLEMENT_RECOMMENDER_LOG_LEVEL   → raw["logging"]["level"]
      SUPPLEMENT_RECOMMENDER_DEBUG       → raw["debug"]
      SUPPLEMENT_RECOMMENDER_MIN_SCORE   → raw["scoring"]["min_score_threshold"]
      SUPPLEMENT_RECOMMENDER_CATALOG     → raw["data"]["catalog_file"]
      SUPPLEMENT_RECOMMENDER_SOURCE_URL  → raw["source"]["base_url"]
    """
    if log_level := os.environ.get(f"{_ENV_PREFIX}LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get(f"{_ENV_PREFIX}DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if min_score := os.environ.get(f"{_ENV_PREFIX}MIN_SCORE"):
        raw.setdefault("scoring", {})["min_score_threshold"] = int(min_score)

    if catalog := os.environ.get(f"{_ENV_PREFIX}CATALOG"):
        raw.setdefault("data", {})["catalog_file"] = catalog

    if source_url := os.environ.get(f"{_ENV_PREFIX}SOURCE_URL"):
        raw.setdefault("source", {})["base_url"] = source_url

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        scoring=ScoringConfig(**raw.get("scoring", {})),
        data=DataConfig(**raw.get("data", {})),
        source=SourceConfig(**raw.get("source", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
