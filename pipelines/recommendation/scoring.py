"""
Scoring Logic for Job Similarity.

Responsibilities:
- Compute a deterministic similarity score between the reference job and
  each candidate job.
- Emit a per-factor score breakdown.

Non-Responsibilities:
- No database access.
- No candidate selection.
- No diversity filtering.

Invariant:
Given identical inputs, this module must always return the same scores.
Factor values are finite and in [0, 1] before they are combined; a value
that is not is counted as a fault and replaced with 0.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from similarjobs.logger import get_logger
from similarjobs.normalize import normalize_level
from similarjobs.records import JobRecord, ScoredCandidate

from . import features
from .tables import EXPERIENCE_ORDER
from .weights import (
    CAREER_PROGRESSION,
    COMPANY_SIZE,
    DEFAULT_CONFIG,
    DEPARTMENT,
    EXPERIENCE,
    FEATURED_BOOST,
    INDUSTRY,
    JOB_TYPE,
    LOCATION,
    POPULARITY,
    RECENCY,
    SALARY,
    SAME_COMPANY_BOOST,
    SKILLS,
    TITLE,
    WORK_MODE,
    ScoringConfig,
)

logger = get_logger()

# Slack allowed above 1.0 before a factor value counts as out of range
_RANGE_TOLERANCE = 1e-9


def guard_factor(name: str, value: Optional[float]) -> float:
    """Return ``value`` clamped to [0, 1], or 0 if it is not usable."""
    if (
        value is None
        or not math.isfinite(value)
        or value < 0
        or value > 1.0 + _RANGE_TOLERANCE
    ):
        logger.record_factor_fault(name)
        logger.debug("Factor value coerced to 0", factor=name, value=repr(value))
        return 0.0
    return min(1.0, value)


def _safe(name: str, compute: Callable[[], float]) -> float:
    try:
        value = compute()
    except (ArithmeticError, ValueError, TypeError) as e:
        logger.debug("Factor computation failed", factor=name, error=str(e))
        value = math.nan
    return guard_factor(name, value)


def _present(value) -> bool:
    return value is not None and value != ""


def factor_scores(
    reference: JobRecord,
    candidate: JobRecord,
    config: ScoringConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> Dict[str, float]:
    """
    Compute every applicable factor for one candidate.

    Factors whose inputs are absent on both sides are left out entirely;
    their weight is not redistributed, so sparse postings score lower.
    """
    now = _aware(now)
    scores: Dict[str, float] = {}

    scores[TITLE] = _safe(TITLE, lambda: features.text_similarity(reference.title, candidate.title))

    if reference.skills is not None or candidate.skills is not None:
        scores[SKILLS] = _safe(
            SKILLS,
            lambda: features.array_similarity(reference.skills, candidate.skills, config.skill_importance),
        )

    scores[LOCATION] = _safe(
        LOCATION, lambda: features.location_proximity(reference.location, candidate.location)
    )

    scores[SALARY] = _safe(
        SALARY,
        lambda: features.salary_compatibility(
            (reference.salary_min, reference.salary_max),
            (candidate.salary_min, candidate.salary_max),
        ),
    )

    scores[EXPERIENCE] = _safe(
        EXPERIENCE,
        lambda: features.experience_compatibility(reference.experience_level, candidate.experience_level),
    )

    if reference.industries or candidate.industries:
        scores[INDUSTRY] = _safe(
            INDUSTRY, lambda: features.industry_similarity(reference.industries, candidate.industries)
        )

    if _present(reference.job_type) or _present(candidate.job_type):
        scores[JOB_TYPE] = _safe(
            JOB_TYPE, lambda: features.job_type_compatibility(reference.job_type, candidate.job_type)
        )

    if _present(reference.department) or _present(candidate.department):
        scores[DEPARTMENT] = _safe(
            DEPARTMENT, lambda: features.text_similarity(reference.department, candidate.department)
        )

    if _present(reference.remote_work) or _present(candidate.remote_work):
        scores[WORK_MODE] = _safe(
            WORK_MODE, lambda: features.work_mode_compatibility(reference.remote_work, candidate.remote_work)
        )

    if _present(reference.company_size) or _present(candidate.company_size):
        scores[COMPANY_SIZE] = _safe(
            COMPANY_SIZE,
            lambda: features.company_size_match(
                reference.company_size, candidate.company_size, config.company_size_mismatch
            ),
        )

    company = candidate.company
    scores[FEATURED_BOOST] = _safe(
        FEATURED_BOOST,
        lambda: features.featured_boost(
            candidate.is_featured,
            candidate.is_premium,
            bool(company and company.is_featured),
            company.rating if company else None,
            config.featured_components,
            config.high_rating_threshold,
        ),
    )

    if candidate.created_at is not None:
        scores[RECENCY] = _safe(
            RECENCY,
            lambda: features.recency_score(
                candidate.created_at, now, config.recency_steps, config.recency_floor
            ),
        )

    return scores


def _career_progression(reference: JobRecord, candidate: JobRecord) -> Optional[float]:
    ref_level = normalize_level(reference.experience_level)
    cand_level = normalize_level(candidate.experience_level)
    if ref_level not in EXPERIENCE_ORDER or cand_level not in EXPERIENCE_ORDER:
        return None
    return 1.0 if EXPERIENCE_ORDER.index(cand_level) > EXPERIENCE_ORDER.index(ref_level) else 0.0


def is_same_company(reference: JobRecord, candidate: JobRecord) -> bool:
    return bool(reference.company_id) and candidate.company_id == reference.company_id


def score_candidate(
    reference: JobRecord,
    candidate: JobRecord,
    config: ScoringConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> ScoredCandidate:
    """
    Score one candidate against the reference job.

    The weighted factor sum and the bonuses form the base score; a
    candidate from the reference's company has it multiplied by the
    same-company boost. The result is clamped to [0, 1].
    """
    scores = factor_scores(reference, candidate, config, now)

    total = 0.0
    for factor, value in scores.items():
        total += value * config.weight(factor)

    popularity = _safe(POPULARITY, lambda: features.popularity_score(candidate.views, candidate.applications))
    scores[POPULARITY] = popularity
    total += popularity * config.bonus(POPULARITY)

    progression = _career_progression(reference, candidate)
    if progression is not None:
        scores[CAREER_PROGRESSION] = progression
        total += progression * config.bonus(CAREER_PROGRESSION)

    if not math.isfinite(total):
        logger.record_factor_fault("aggregate")
        total = 0.0
    base_score = max(0.0, total)

    score = base_score
    if is_same_company(reference, candidate):
        score = base_score * config.same_company_boost
        scores[SAME_COMPANY_BOOST] = config.same_company_boost - 1.0

    if not math.isfinite(score):
        logger.record_factor_fault("aggregate")
        score = 0.0

    return ScoredCandidate(
        job=candidate,
        score=min(1.0, max(0.0, score)),
        factor_scores=scores,
        base_score=base_score,
    )


def score_candidates(
    reference: JobRecord,
    candidates: Sequence[JobRecord],
    config: ScoringConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
    workers: Optional[int] = None,
    check_cancelled: Optional[Callable[[], None]] = None,
) -> List[ScoredCandidate]:
    """
    Score every candidate, preserving input order.

    With ``workers`` > 1 candidates are scored on a thread pool; the output
    is identical either way. ``check_cancelled`` is called before each
    candidate and may raise to abort the whole batch.
    """
    now = _aware(now)

    def _score(candidate: JobRecord) -> ScoredCandidate:
        if check_cancelled is not None:
            check_cancelled()
        return score_candidate(reference, candidate, config, now)

    if workers and workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=min(workers, len(candidates))) as pool:
            return list(pool.map(_score, candidates))
    return [_score(c) for c in candidates]


def _aware(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now
