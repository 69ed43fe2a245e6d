"""
Scoring Configuration.

Responsibilities:
- Define the default factor weight table and boost constants.
- Validate externally supplied overrides.

Non-Responsibilities:
- No score computation.
- No file or environment access.

Invariant:
Factor weights are non-negative and sum to 1.0.
"""

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping

TITLE = "title"
SKILLS = "skills"
LOCATION = "location"
SALARY = "salary"
EXPERIENCE = "experience"
INDUSTRY = "industry"
JOB_TYPE = "job_type"
DEPARTMENT = "department"
WORK_MODE = "work_mode"
COMPANY_SIZE = "company_size"
FEATURED_BOOST = "featured_boost"
RECENCY = "recency"

POPULARITY = "popularity"
CAREER_PROGRESSION = "career_progression"
SAME_COMPANY_BOOST = "same_company_boost"

DEFAULT_WEIGHTS: Mapping[str, float] = MappingProxyType({
    TITLE: 0.18,
    SKILLS: 0.16,
    LOCATION: 0.14,
    SALARY: 0.12,
    EXPERIENCE: 0.12,
    INDUSTRY: 0.08,
    JOB_TYPE: 0.06,
    DEPARTMENT: 0.05,
    WORK_MODE: 0.04,
    COMPANY_SIZE: 0.02,
    FEATURED_BOOST: 0.02,
    RECENCY: 0.01,
})

# Added to the weighted sum, outside the weight table
DEFAULT_BONUSES: Mapping[str, float] = MappingProxyType({
    POPULARITY: 0.01,
    CAREER_PROGRESSION: 0.02,
})

# Components of the featured boost factor, capped at 1.0 in total
DEFAULT_FEATURED_COMPONENTS: Mapping[str, float] = MappingProxyType({
    "featured_or_premium": 0.5,
    "featured_company": 0.3,
    "high_rating": 0.2,
})

DEFAULT_SKILL_IMPORTANCE: Mapping[str, float] = MappingProxyType({
    "javascript": 1.2,
    "react": 1.2,
    "node.js": 1.2,
    "python": 1.1,
    "java": 1.1,
    "sql": 1.0,
    "aws": 1.1,
    "docker": 1.0,
})

# (max age in days, score); anything older gets RECENCY_FLOOR
DEFAULT_RECENCY_STEPS = ((1, 1.0), (7, 0.8), (30, 0.6), (90, 0.4))
RECENCY_FLOOR = 0.2


class ConfigError(ValueError):
    """Raised when a scoring configuration is invalid."""
    pass


@dataclass(frozen=True)
class ScoringConfig:
    """All tunable constants used by the weighted scorer."""

    weights: Mapping[str, float] = field(default_factory=lambda: DEFAULT_WEIGHTS)
    bonuses: Mapping[str, float] = field(default_factory=lambda: DEFAULT_BONUSES)
    featured_components: Mapping[str, float] = field(default_factory=lambda: DEFAULT_FEATURED_COMPONENTS)
    skill_importance: Mapping[str, float] = field(default_factory=lambda: DEFAULT_SKILL_IMPORTANCE)
    same_company_boost: float = 1.25
    high_rating_threshold: float = 4.0
    company_size_mismatch: float = 0.3
    recency_steps: tuple = DEFAULT_RECENCY_STEPS
    recency_floor: float = RECENCY_FLOOR

    def __post_init__(self):
        # Freeze whatever mappings were passed in
        for name in ("weights", "bonuses", "featured_components", "skill_importance"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        self.validate()

    def validate(self) -> None:
        unknown = set(self.weights) - set(DEFAULT_WEIGHTS)
        if unknown:
            raise ConfigError(f"Unknown factor(s) in weight table: {sorted(unknown)}")
        for name, weight in self.weights.items():
            if not _is_non_negative(weight):
                raise ConfigError(f"Weight for '{name}' must be a non-negative number")
        total = sum(self.weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ConfigError(f"Factor weights must sum to 1.0 (got {total:.4f})")

        unknown = set(self.bonuses) - set(DEFAULT_BONUSES)
        if unknown:
            raise ConfigError(f"Unknown bonus(es): {sorted(unknown)}")
        for name, value in list(self.bonuses.items()) + list(self.featured_components.items()):
            if not _is_non_negative(value):
                raise ConfigError(f"Value for '{name}' must be a non-negative number")
        for skill, value in self.skill_importance.items():
            if not _is_non_negative(value):
                raise ConfigError(f"Importance for skill '{skill}' must be a non-negative number")
        if not _is_non_negative(self.same_company_boost):
            raise ConfigError("same_company_boost must be a non-negative number")

    def weight(self, factor: str) -> float:
        return self.weights.get(factor, 0.0)

    def bonus(self, name: str) -> float:
        return self.bonuses.get(name, 0.0)

    def with_overrides(self, overrides: Dict[str, Any]) -> "ScoringConfig":
        """Return a copy with ``overrides`` merged in.

        Mapping fields are merged key by key (weights replace the table
        entirely when given, since they must still sum to 1.0).
        """
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in self.__dataclass_fields__:
                raise ConfigError(f"Unknown configuration key: {key}")
            if key == "weights":
                changes[key] = dict(value)
            elif key in ("bonuses", "featured_components", "skill_importance"):
                merged = dict(getattr(self, key))
                merged.update(value)
                changes[key] = merged
            elif key == "recency_steps":
                changes[key] = tuple((float(days), float(score)) for days, score in value)
            else:
                changes[key] = value
        return replace(self, **changes)


def _is_non_negative(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value >= 0
    )


DEFAULT_CONFIG = ScoringConfig()
