import re
from dataclasses import dataclass
from typing import Any, Dict, List

from .errors import InvalidInputError
from .records import EXPERIENCE_LEVELS, JOB_TYPES, WORK_MODES

REQUIRED_STR_FIELDS = ["id", "title"]
OPTIONAL_STR_FIELDS = [
    "description",
    "location",
    "department",
    "salary",
    "region",
    "status",
]
ENUM_FIELDS = {
    "job_type": JOB_TYPES,
    "experience_level": EXPERIENCE_LEVELS,
    "remote_work": WORK_MODES,
}
_CAMEL = {
    "job_type": "jobType",
    "experience_level": "experienceLevel",
    "remote_work": "remoteWork",
    "salary_min": "salaryMin",
    "salary_max": "salaryMax",
}

JOB_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

DEFAULT_LIMIT = 3
MIN_LIMIT = 1
MAX_LIMIT = 10

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _get(data: Dict[str, Any], field: str) -> Any:
    if field in data:
        return data[field]
    return data.get(_CAMEL.get(field, field))


def validate_job_record(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Accepts snake_case or camelCase keys.
    """
    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    for f, allowed in ENUM_FIELDS.items():
        value = _get(data, f)
        if value is None:
            continue
        if not isinstance(value, str) or value.strip().lower() not in allowed:
            errors.append(f"Field '{f}' must be one of: {', '.join(allowed)}")

    bounds = {}
    for f in ("salary_min", "salary_max"):
        value = _get(data, f)
        if value is None:
            continue
        if not _is_number(value) or value < 0:
            errors.append(f"Field '{f}' must be a non-negative number")
        else:
            bounds[f] = value
    if len(bounds) == 2 and bounds["salary_min"] > bounds["salary_max"]:
        errors.append("Field 'salary_min' must not exceed 'salary_max'")

    skills = data.get("skills")
    if skills is not None:
        if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
            errors.append("Field 'skills' must be a list of strings")

    for f in ("views", "applications"):
        value = data.get(f)
        if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
            errors.append(f"Field '{f}' must be a non-negative integer")

    return errors


def is_valid_job_id(job_id: Any) -> bool:
    return isinstance(job_id, str) and bool(JOB_ID_PATTERN.match(job_id))


@dataclass(frozen=True)
class SimilarJobsRequest:
    job_id: str
    limit: int = DEFAULT_LIMIT
    debug: bool = False


def parse_limit(limit: Any, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """Parse and clamp the requested result count.

    Whole numbers are clamped to [1, maximum]; anything that is not a whole
    number is rejected.
    """
    if limit is None or limit == "":
        return default
    if isinstance(limit, bool):
        raise InvalidInputError("Limit must be an integer")
    if isinstance(limit, str):
        text = limit.strip()
        if not re.fullmatch(r"[+-]?\d+", text):
            raise InvalidInputError("Limit must be an integer")
        limit = int(text)
    elif isinstance(limit, float):
        if not limit.is_integer():
            raise InvalidInputError("Limit must be an integer")
        limit = int(limit)
    elif not isinstance(limit, int):
        raise InvalidInputError("Limit must be an integer")
    return min(max(limit, MIN_LIMIT), maximum)


def parse_debug(debug: Any) -> bool:
    if isinstance(debug, bool):
        return debug
    if debug is None:
        return False
    text = str(debug).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidInputError("Debug flag must be a boolean")


def parse_request(
    job_id: Any,
    limit: Any = None,
    debug: Any = False,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> SimilarJobsRequest:
    """Validate raw request parameters before any lookup happens."""
    if not is_valid_job_id(job_id):
        raise InvalidInputError("Invalid job ID format")
    return SimilarJobsRequest(
        job_id=job_id,
        limit=parse_limit(limit, default_limit, max_limit),
        debug=parse_debug(debug),
    )
