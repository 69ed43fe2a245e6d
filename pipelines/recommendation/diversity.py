"""
Diversity-Aware Selection.

Responsibilities:
- Rank scored candidates by aggregate score.
- Pick the top K while capping how many come from one company.

Non-Responsibilities:
- No scoring.
- No formatting.

Invariant:
No company contributes more than the cap unless K could not otherwise be
filled. Ties keep the supplier's original (most recent first) order.
"""

import math
from typing import Dict, List, Optional, Sequence

from similarjobs.records import ScoredCandidate


def company_cap(limit: int) -> int:
    """Default per-company cap: half of K, rounded up."""
    return max(1, math.ceil(limit / 2))


def rank(scored: Sequence[ScoredCandidate]) -> List[ScoredCandidate]:
    # sorted() is stable, so equal scores keep supplier order
    return sorted(scored, key=lambda s: s.score, reverse=True)


def select_diverse(
    scored: Sequence[ScoredCandidate],
    limit: int,
    max_per_company: Optional[int] = None,
) -> List[ScoredCandidate]:
    """
    Return at most ``limit`` candidates, highest score first.

    The ranked list is walked once admitting candidates whose company is
    still under the cap. If that leaves fewer than ``limit`` results, the
    skipped candidates fill the remaining slots in rank order, so K is
    still reached when one company dominates the pool.
    """
    if limit <= 0:
        return []
    cap = company_cap(limit) if max_per_company is None else max(1, max_per_company)

    ranked = rank(scored)
    admitted: List[int] = []
    deferred: List[int] = []
    counts: Dict[Optional[str], int] = {}
    for position, candidate in enumerate(ranked):
        if len(admitted) >= limit:
            break
        company = candidate.job.company_id
        count = counts.get(company, 0)
        if count < cap:
            admitted.append(position)
            counts[company] = count + 1
        else:
            deferred.append(position)

    if len(admitted) < limit:
        admitted.extend(deferred[: limit - len(admitted)])

    return [ranked[position] for position in sorted(admitted)]
