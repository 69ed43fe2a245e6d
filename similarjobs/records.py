"""
Job and company records consumed by the recommendation pipeline.

Records are transient: they are built from whatever the reference loader and
candidate supplier hand over, scored, formatted and then dropped.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

JOB_TYPES = ("full-time", "part-time", "contract", "internship", "freelance")
EXPERIENCE_LEVELS = ("entry", "junior", "mid", "senior", "lead", "executive")
WORK_MODES = ("on-site", "remote", "hybrid")

# camelCase keys used by the job board API, mapped to record attributes
_JOB_KEY_ALIASES = {
    "jobType": "job_type",
    "type": "job_type",
    "experienceLevel": "experience_level",
    "salaryMin": "salary_min",
    "salaryMax": "salary_max",
    "remoteWork": "remote_work",
    "companyId": "company_id",
    "companyInfo": "company",
    "isFeatured": "is_featured",
    "isPremium": "is_premium",
    "createdAt": "created_at",
    "validTill": "valid_till",
}

_COMPANY_KEY_ALIASES = {
    "companySize": "company_size",
    "size": "company_size",
    "isFeatured": "is_featured",
    "totalReviews": "total_reviews",
}


def to_number(value: Any) -> Optional[float]:
    """Parse a non-negative number, returning None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number < 0 or number == float("inf"):
        return None
    return number


def to_count(value: Any) -> int:
    number = to_number(value)
    return int(number) if number is not None else 0


def to_datetime(value: Any) -> Optional[datetime]:
    """Parse a datetime or ISO-8601 string; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _clean_enum(value: Any) -> Optional[str]:
    text = _clean_str(value)
    return text.lower() if text else None


def _clean_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [part for part in value.split(",")]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _canonical_keys(data: Dict[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in data.items():
        out[aliases.get(key, key)] = value
    return out


@dataclass(frozen=True)
class CompanyInfo:
    """Company details attached to a posting."""

    id: Optional[str] = None
    name: Optional[str] = None
    industries: Tuple[str, ...] = ()
    company_size: Optional[str] = None
    is_featured: bool = False
    rating: Optional[float] = None
    website: Optional[str] = None
    total_reviews: int = 0
    logo: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["CompanyInfo"]:
        if not data:
            return None
        data = _canonical_keys(data, _COMPANY_KEY_ALIASES)
        return cls(
            id=_clean_str(data.get("id")),
            name=_clean_str(data.get("name")),
            industries=tuple(_clean_list(data.get("industries")) or ()),
            company_size=_clean_str(data.get("company_size")),
            is_featured=bool(data.get("is_featured")),
            rating=to_number(data.get("rating")),
            website=_clean_str(data.get("website")),
            total_reviews=to_count(data.get("total_reviews")),
            logo=_clean_str(data.get("logo")),
        )


@dataclass(frozen=True)
class JobRecord:
    """A job posting, either the reference or one candidate.

    Every field except ``id`` and ``title`` may be missing. Estimators treat
    ``None`` as "unknown" and fall back to their neutral defaults.
    """

    id: str
    title: str = ""
    description: Optional[str] = None
    location: Optional[str] = None
    skills: Optional[Tuple[str, ...]] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary: Optional[str] = None
    remote_work: Optional[str] = None
    department: Optional[str] = None
    company_id: Optional[str] = None
    company: Optional[CompanyInfo] = None
    is_featured: bool = False
    is_premium: bool = False
    created_at: Optional[datetime] = None
    views: int = 0
    applications: int = 0
    region: Optional[str] = None
    status: Optional[str] = None
    valid_till: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        # Naive timestamps are UTC, however the record was built
        for name in ("created_at", "valid_till"):
            value = getattr(self, name)
            if isinstance(value, datetime) and value.tzinfo is None:
                object.__setattr__(self, name, value.replace(tzinfo=timezone.utc))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobRecord":
        """Build a record from a snake_case or camelCase mapping."""
        data = _canonical_keys(data, _JOB_KEY_ALIASES)
        company = data.get("company")
        if isinstance(company, CompanyInfo):
            company_info = company
        elif isinstance(company, dict):
            company_info = CompanyInfo.from_dict(company)
        elif isinstance(company, str) and company.strip():
            company_info = CompanyInfo(name=company.strip())
        else:
            company_info = None

        company_id = _clean_str(data.get("company_id"))
        if company_id is None and company_info is not None:
            company_id = company_info.id

        skills = _clean_list(data.get("skills"))
        known = set(cls.__dataclass_fields__)
        return cls(
            id=str(data.get("id", "")).strip(),
            title=_clean_str(data.get("title")) or "",
            description=_clean_str(data.get("description")),
            location=_clean_str(data.get("location")),
            skills=tuple(skills) if skills is not None else None,
            job_type=_clean_enum(data.get("job_type")),
            experience_level=_clean_enum(data.get("experience_level")),
            salary_min=to_number(data.get("salary_min")),
            salary_max=to_number(data.get("salary_max")),
            salary=_clean_str(data.get("salary")),
            remote_work=_clean_enum(data.get("remote_work")),
            department=_clean_str(data.get("department")),
            company_id=company_id,
            company=company_info,
            is_featured=bool(data.get("is_featured")),
            is_premium=bool(data.get("is_premium")),
            created_at=to_datetime(data.get("created_at")),
            views=to_count(data.get("views")),
            applications=to_count(data.get("applications")),
            region=_clean_enum(data.get("region")),
            status=_clean_enum(data.get("status")),
            valid_till=to_datetime(data.get("valid_till")),
            extra={k: v for k, v in data.items() if k not in known},
        )

    @property
    def company_name(self) -> Optional[str]:
        return self.company.name if self.company else None

    @property
    def industries(self) -> Tuple[str, ...]:
        return self.company.industries if self.company else ()

    @property
    def company_size(self) -> Optional[str]:
        return self.company.company_size if self.company else None


@dataclass
class ScoredCandidate:
    """A candidate with its aggregate score and per-factor breakdown."""

    job: JobRecord
    score: float
    factor_scores: Dict[str, float] = field(default_factory=dict)
    base_score: float = 0.0  # before the same-company multiplier
