"""
Feature Extraction for Job Similarity.

Responsibilities:
- Compute individual similarity and compatibility features in [0, 1].
- Normalize and compare fields (title, skills, salary, location, level).

Non-Responsibilities:
- No weighting logic.
- No candidate selection.
- No persistence.

Invariant:
Missing data must never raise. Every estimator returns a finite value in
[0, 1], falling back to a neutral or zero score on incomplete input.
"""

import math
from datetime import datetime
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from similarjobs.normalize import (
    location_parts,
    normalize_item,
    normalize_job_type,
    normalize_level,
    normalize_location,
    normalize_words,
    normalize_work_mode,
)

from .tables import (
    EXPERIENCE_BOTH_MISSING,
    EXPERIENCE_MATRIX,
    EXPERIENCE_ONE_MISSING,
    EXPERIENCE_UNLISTED,
    JOB_TYPE_DEFAULT,
    JOB_TYPE_MATRIX,
    WORK_MODE_DEFAULT,
    WORK_MODE_MATRIX,
    lookup,
)

# Words this short are treated as noise by the Jaccard part of text similarity
MIN_WORD_LENGTH = 3

SALARY_BOTH_UNKNOWN = 0.5
SALARY_ONE_UNKNOWN = 0.3


def clamp_unit(value: float) -> float:
    """Clamp to [0, 1]; NaN and infinities become 0."""
    if value is None or not math.isfinite(value):
        return 0.0
    return min(1.0, max(0.0, value))


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit cost insert/delete/substitute."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def jaccard(left: set, right: set) -> float:
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def text_similarity(text1: Optional[str], text2: Optional[str]) -> float:
    """Fuzzy similarity of two free-text strings.

    0.7 x Jaccard over words longer than two characters plus 0.3 x a
    Levenshtein-derived similarity. Identical normalized text scores 1.0,
    empty input scores 0.0.
    """
    norm1 = normalize_words(text1 or "")
    norm2 = normalize_words(text2 or "")
    if not norm1 or not norm2:
        return 0.0
    if norm1 == norm2:
        return 1.0

    words1 = {w for w in norm1.split(" ") if len(w) >= MIN_WORD_LENGTH}
    words2 = {w for w in norm2.split(" ") if len(w) >= MIN_WORD_LENGTH}
    word_score = jaccard(words1, words2)

    max_len = max(len(norm1), len(norm2))
    edit_score = 1 - levenshtein(norm1, norm2) / max_len

    return clamp_unit(word_score * 0.7 + edit_score * 0.3)


def _normalized_set(items: Iterable) -> set:
    return {n for n in (normalize_item(i) for i in items if i is not None) if n}


def array_similarity(
    items1: Optional[Iterable],
    items2: Optional[Iterable],
    weights: Optional[Mapping[str, float]] = None,
) -> float:
    """Jaccard similarity of two string collections.

    With ``weights`` each item contributes its importance (default 1.0)
    to both the intersection and the union, so matching an important skill
    counts for more than matching an obscure one.
    """
    set1 = _normalized_set(items1 or ())
    set2 = _normalized_set(items2 or ())
    if not set1 and not set2:
        return 1.0
    if not set1 or not set2:
        return 0.0

    if not weights:
        return clamp_unit(jaccard(set1, set2))

    importance = {normalize_item(k): v for k, v in weights.items()}

    def weight_of(item):
        value = importance.get(item, 1.0)
        return value if value is not None and math.isfinite(value) and value >= 0 else 1.0

    matched = sum(weight_of(i) for i in set1 & set2)
    total = sum(weight_of(i) for i in set1 | set2)
    if total <= 0:
        return clamp_unit(jaccard(set1, set2))
    return clamp_unit(matched / total)


def _salary_bounds(salary_min: Optional[float], salary_max: Optional[float]) -> Tuple[float, float]:
    low = salary_min if salary_min is not None and salary_min > 0 else 0.0
    high = salary_max if salary_max is not None and salary_max > 0 else math.inf
    return low, high


def _is_unknown(low: float, high: float) -> bool:
    return low == 0 and high == math.inf


def _ratio(numerator: float, denominator: float) -> float:
    try:
        value = numerator / denominator
    except ZeroDivisionError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def salary_compatibility(
    reference: Tuple[Optional[float], Optional[float]],
    candidate: Tuple[Optional[float], Optional[float]],
) -> float:
    """Compatibility of two (min, max) salary ranges.

    A missing minimum counts as 0 and a missing maximum as unbounded.
    Disjoint ranges score 0; overlapping ones blend overlap coverage of the
    reference range (0.5), range-width similarity (0.3) and midpoint
    proximity (0.2).
    """
    ref_low, ref_high = _salary_bounds(*reference)
    cand_low, cand_high = _salary_bounds(*candidate)

    ref_unknown = _is_unknown(ref_low, ref_high)
    cand_unknown = _is_unknown(cand_low, cand_high)
    if ref_unknown and cand_unknown:
        return SALARY_BOTH_UNKNOWN
    if ref_unknown or cand_unknown:
        return SALARY_ONE_UNKNOWN

    # An inverted range is taken as written the other way round
    if ref_low > ref_high:
        ref_low, ref_high = ref_high, ref_low
    if cand_low > cand_high:
        cand_low, cand_high = cand_high, cand_low

    overlap_min = max(ref_low, cand_low)
    overlap_max = min(ref_high, cand_high)
    if overlap_max < overlap_min:
        return 0.0

    overlap = overlap_max - overlap_min
    ref_range = ref_high - ref_low
    cand_range = cand_high - cand_low

    if ref_range > 0:
        overlap_score = _ratio(overlap, ref_range)
    else:
        # Zero-width reference range sitting inside the candidate range
        overlap_score = 1.0

    if ref_range == cand_range:
        range_score = 1.0 if math.isfinite(ref_range) else 0.0
    else:
        range_score = _ratio(min(ref_range, cand_range), max(ref_range, cand_range))

    ref_mid = (ref_low + ref_high) / 2
    cand_mid = (cand_low + cand_high) / 2
    if ref_mid == cand_mid and math.isfinite(ref_mid):
        midpoint_score = 1.0
    else:
        midpoint_score = 1 - _ratio(abs(ref_mid - cand_mid), max(ref_mid, cand_mid))
        if not math.isfinite(ref_mid) or not math.isfinite(cand_mid):
            midpoint_score = 0.0

    return clamp_unit(
        clamp_unit(overlap_score) * 0.5
        + clamp_unit(range_score) * 0.3
        + clamp_unit(midpoint_score) * 0.2
    )


def location_proximity(location1: Optional[str], location2: Optional[str]) -> float:
    """Hierarchical match of "city, state, country" style locations."""
    if not location1 or not location2:
        return 0.0
    loc1 = normalize_location(location1)
    loc2 = normalize_location(location2)
    if not loc1 or not loc2:
        return 0.0
    if loc1 == loc2:
        return 1.0

    parts1 = location_parts(loc1)
    parts2 = location_parts(loc2)
    if not parts1 or not parts2:
        return 0.0

    if parts1[0] == parts2[0]:
        return 0.95
    if len(parts1) > 1 and len(parts2) > 1 and parts1[1] == parts2[1]:
        return 0.75
    if parts1[-1] == parts2[-1]:
        return 0.4

    words1 = {w for part in parts1 for w in part.split(" ") if w}
    words2 = {w for part in parts2 for w in part.split(" ") if w}
    shared = words1 & words2
    if shared:
        return min(0.3, len(shared) * 0.1)
    return 0.0


def experience_compatibility(level1: Optional[str], level2: Optional[str]) -> float:
    left = normalize_level(level1)
    right = normalize_level(level2)
    return lookup(
        EXPERIENCE_MATRIX,
        left,
        right,
        default=EXPERIENCE_UNLISTED if left and right else EXPERIENCE_ONE_MISSING,
        both_missing=EXPERIENCE_BOTH_MISSING,
    )


def job_type_compatibility(type1: Optional[str], type2: Optional[str]) -> float:
    return lookup(JOB_TYPE_MATRIX, normalize_job_type(type1), normalize_job_type(type2), JOB_TYPE_DEFAULT)


def work_mode_compatibility(mode1: Optional[str], mode2: Optional[str]) -> float:
    return lookup(WORK_MODE_MATRIX, normalize_work_mode(mode1), normalize_work_mode(mode2), WORK_MODE_DEFAULT)


def company_size_match(size1: Optional[str], size2: Optional[str], mismatch: float = 0.3) -> float:
    if not size1 or not size2:
        return 0.0
    return 1.0 if normalize_words(size1) == normalize_words(size2) else clamp_unit(mismatch)


def industry_similarity(industries1: Sequence[str], industries2: Sequence[str]) -> float:
    """Best text similarity between any pair of industries."""
    best = 0.0
    for left in industries1 or ():
        for right in industries2 or ():
            best = max(best, text_similarity(left, right))
            if best >= 1.0:
                return 1.0
    return best


def featured_boost(
    is_featured: bool,
    is_premium: bool,
    company_featured: bool,
    company_rating: Optional[float],
    components: Mapping[str, float],
    rating_threshold: float = 4.0,
) -> float:
    boost = 0.0
    if is_featured or is_premium:
        boost += components.get("featured_or_premium", 0.0)
    if company_featured:
        boost += components.get("featured_company", 0.0)
    if company_rating is not None and company_rating > rating_threshold:
        boost += components.get("high_rating", 0.0)
    return clamp_unit(min(boost, 1.0))


def recency_score(
    created_at: Optional[datetime],
    now: datetime,
    steps: Sequence[Tuple[float, float]],
    floor: float,
) -> float:
    if created_at is None:
        return 0.0
    age_days = (now - created_at).total_seconds() / 86400
    for max_days, score in steps:
        if age_days < max_days:
            return clamp_unit(score)
    return clamp_unit(floor)


def popularity_score(views: int, applications: int) -> float:
    return clamp_unit(min(1.0, (views or 0) / 1000 + (applications or 0) / 100))
