"""
Result Formatting.

Responsibilities:
- Shape selected candidates into the response contract.

Non-Responsibilities:
- No scoring.
- No selection.

Invariant:
The similarity score is always a finite percentage string; per-factor
scores appear only when debug output is requested.
"""

import math
from typing import Any, Dict, List, Optional, Sequence

from similarjobs.records import JobRecord, ScoredCandidate

DESCRIPTION_LIMIT = 150
NO_COMPANY = "Company not specified"
NO_SALARY = "Salary not disclosed"
LAKH = 100000


def _lpa(amount: float) -> str:
    return f"{amount / LAKH:.1f}"


def format_salary(job: JobRecord) -> str:
    """Free-text salary when present, else a range in lakhs per annum."""
    if job.salary:
        return job.salary
    low, high = job.salary_min, job.salary_max
    if low and high:
        return f"₹{_lpa(low)}-{_lpa(high)} LPA"
    if low:
        return f"From ₹{_lpa(low)} LPA"
    if high:
        return f"Up to ₹{_lpa(high)} LPA"
    return NO_SALARY


def truncate(text: Optional[str], limit: int = DESCRIPTION_LIMIT) -> str:
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_percentage(score: float) -> str:
    if score is None or not math.isfinite(score):
        return "0.0"
    return f"{min(1.0, max(0.0, score)) * 100:.1f}"


def format_candidate(scored: ScoredCandidate, debug: bool = False) -> Dict[str, Any]:
    job = scored.job
    company = job.company
    result: Dict[str, Any] = {
        "id": job.id,
        "title": job.title,
        "company": job.company_name or NO_COMPANY,
        "company_id": job.company_id,
        "company_logo": company.logo if company else None,
        "location": job.location,
        "salary": format_salary(job),
        "salary_min": job.salary_min,
        "salary_max": job.salary_max,
        "type": job.job_type,
        "experience_level": job.experience_level,
        "department": job.department,
        "skills": list(job.skills or ()),
        "remote_work": job.remote_work,
        "posted": job.created_at.strftime("%d/%m/%Y") if job.created_at else None,
        "posted_date": job.created_at.isoformat() if job.created_at else None,
        "applications": max(0, job.applications or 0),
        "views": max(0, job.views or 0),
        "is_featured": job.is_featured,
        "is_premium": job.is_premium,
        "description": truncate(job.description),
        "company_info": {
            "industry": job.industries[0] if job.industries else "Other",
            "size": company.company_size if company else None,
            "website": company.website if company else None,
            "is_featured": company.is_featured if company else None,
            "rating": company.rating if company else None,
            "total_reviews": company.total_reviews if company else None,
        },
        "similarity_score": format_percentage(scored.score),
    }
    if debug:
        result["factor_scores"] = {name: round(value, 4) for name, value in scored.factor_scores.items()}
    return result


def format_results(selected: Sequence[ScoredCandidate], debug: bool = False) -> List[Dict[str, Any]]:
    return [format_candidate(s, debug) for s in selected]
