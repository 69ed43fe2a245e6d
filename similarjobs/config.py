"""
Runtime configuration.

Settings come from environment variables (optionally loaded from .env);
scoring constants come from the defaults in the recommendation pipeline,
optionally overlaid with a JSON file.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from pipelines.recommendation.candidate_selector import MAX_CANDIDATES
from pipelines.recommendation.weights import DEFAULT_CONFIG, ConfigError, ScoringConfig

from .schema import DEFAULT_LIMIT, MAX_LIMIT


@dataclass(frozen=True)
class Settings:
    db_path: Path = Path("data/jobs.db")
    log_level: str = "INFO"
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    candidate_limit: int = MAX_CANDIDATES
    weights_path: Optional[Path] = None
    workers: Optional[int] = None


def _int_env(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer (got {raw!r})")
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum} (got {value})")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``env`` (default: the process environment)."""
    env = os.environ if env is None else env
    max_limit = _int_env(env, "SIMILARJOBS_MAX_LIMIT", MAX_LIMIT)
    default_limit = min(_int_env(env, "SIMILARJOBS_DEFAULT_LIMIT", DEFAULT_LIMIT), max_limit)
    weights = env.get("SIMILARJOBS_WEIGHTS")
    workers = env.get("SIMILARJOBS_WORKERS")
    return Settings(
        db_path=Path(env.get("SIMILARJOBS_DB") or "data/jobs.db"),
        log_level=(env.get("SIMILARJOBS_LOG_LEVEL") or "INFO").upper(),
        default_limit=default_limit,
        max_limit=max_limit,
        candidate_limit=_int_env(env, "SIMILARJOBS_CANDIDATE_LIMIT", MAX_CANDIDATES),
        weights_path=Path(weights) if weights else None,
        workers=_int_env(env, "SIMILARJOBS_WORKERS", 1) if workers else None,
    )


def load_scoring_config(path: Optional[Path] = None) -> ScoringConfig:
    """
    Load scoring overrides from a JSON file.

    Args:
        path: JSON object whose keys are ScoringConfig fields, e.g.
            {"weights": {...}, "same_company_boost": 1.2}

    Returns:
        The default config when path is None, else the overlaid config

    Raises:
        ConfigError: unreadable file, unknown keys or invalid values
    """
    if path is None:
        return DEFAULT_CONFIG
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read scoring config {path}: {e}") from e
    if not isinstance(overrides, dict):
        raise ConfigError(f"Scoring config {path} must contain a JSON object")
    return DEFAULT_CONFIG.with_overrides(overrides)
