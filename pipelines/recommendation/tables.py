"""
Compatibility Tables.

Responsibilities:
- Hold the fixed experience, job-type and work-mode compatibility matrices.
- Provide lookups with explicit defaults for unknown or missing values.

Non-Responsibilities:
- No weighting.
- No text or numeric similarity.

Invariant:
Tables are read-only; they are shared across concurrent requests.
"""

from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from similarjobs.records import EXPERIENCE_LEVELS as EXPERIENCE_ORDER
from similarjobs.records import JOB_TYPES as JOB_TYPE_ORDER
from similarjobs.records import WORK_MODES as WORK_MODE_ORDER


def _freeze(matrix: dict) -> Mapping[str, Mapping[str, float]]:
    return MappingProxyType({row: MappingProxyType(dict(cols)) for row, cols in matrix.items()})


EXPERIENCE_MATRIX = _freeze({
    "entry": {"entry": 1.0, "junior": 0.8, "mid": 0.4, "senior": 0.1, "lead": 0.05, "executive": 0.02},
    "junior": {"entry": 0.7, "junior": 1.0, "mid": 0.8, "senior": 0.3, "lead": 0.1, "executive": 0.05},
    "mid": {"entry": 0.3, "junior": 0.7, "mid": 1.0, "senior": 0.8, "lead": 0.4, "executive": 0.1},
    "senior": {"entry": 0.1, "junior": 0.3, "mid": 0.7, "senior": 1.0, "lead": 0.8, "executive": 0.3},
    "lead": {"entry": 0.05, "junior": 0.1, "mid": 0.4, "senior": 0.7, "lead": 1.0, "executive": 0.7},
    "executive": {"entry": 0.02, "junior": 0.05, "mid": 0.1, "senior": 0.3, "lead": 0.7, "executive": 1.0},
})

JOB_TYPE_MATRIX = _freeze({
    "full-time": {"full-time": 1.0, "part-time": 0.3, "contract": 0.6, "internship": 0.2, "freelance": 0.4},
    "part-time": {"full-time": 0.3, "part-time": 1.0, "contract": 0.4, "internship": 0.5, "freelance": 0.7},
    "contract": {"full-time": 0.6, "part-time": 0.4, "contract": 1.0, "internship": 0.3, "freelance": 0.6},
    "internship": {"full-time": 0.2, "part-time": 0.5, "contract": 0.3, "internship": 1.0, "freelance": 0.2},
    "freelance": {"full-time": 0.4, "part-time": 0.7, "contract": 0.6, "internship": 0.2, "freelance": 1.0},
})

WORK_MODE_MATRIX = _freeze({
    "on-site": {"on-site": 1.0, "remote": 0.2, "hybrid": 0.7},
    "remote": {"on-site": 0.2, "remote": 1.0, "hybrid": 0.8},
    "hybrid": {"on-site": 0.7, "remote": 0.8, "hybrid": 1.0},
})

# Experience: one side unknown / both unknown / level not in the table
EXPERIENCE_ONE_MISSING = 0.3
EXPERIENCE_BOTH_MISSING = 0.5
EXPERIENCE_UNLISTED = 0.2

JOB_TYPE_DEFAULT = 0.2
WORK_MODE_DEFAULT = 0.3


def lookup(
    matrix: Mapping[str, Mapping[str, float]],
    left: Optional[str],
    right: Optional[str],
    default: float,
    both_missing: Optional[float] = None,
) -> float:
    """Look up ``matrix[left][right]``.

    Returns ``both_missing`` (or ``default``) when neither side is known and
    ``default`` when only one side is known or a value is not in the table.
    """
    if not left and not right:
        return default if both_missing is None else both_missing
    if not left or not right:
        return default
    return matrix.get(left, {}).get(right, default)


def is_monotone(matrix: Mapping[str, Mapping[str, float]], order: Sequence[str]) -> bool:
    """True when each row never increases as ordinal distance grows."""
    for i, row in enumerate(order):
        for j in range(len(order)):
            nearer = j + 1 if j < i else j - 1
            if j == i:
                continue
            if matrix[row][order[j]] > matrix[row][order[nearer]]:
                return False
    return True
