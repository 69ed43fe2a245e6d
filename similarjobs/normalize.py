import re

_NON_WORD = re.compile(r"[^\w\s]")
_NON_WORD_OR_COMMA = re.compile(r"[^\w\s,]")


def normalize_text(s: str) -> str:
    return " ".join(s.strip().lower().split())


def normalize_words(s: str) -> str:
    """Lowercase, turn punctuation into spaces and collapse whitespace."""
    return normalize_text(_NON_WORD.sub(" ", s or ""))


def normalize_item(item: object) -> str:
    """Normalize one skill/array entry; punctuation is dropped, not spaced."""
    return normalize_text(_NON_WORD.sub("", str(item)))


def normalize_location(location: str) -> str:
    """Like normalize_words, but keeps commas so the parts survive."""
    return normalize_text(_NON_WORD_OR_COMMA.sub("", location or ""))


def location_parts(location: str) -> list[str]:
    return [p.strip() for p in normalize_location(location).split(",") if p.strip()]


REMOTE_SYNS = {"remote", "fully remote", "work from home", "wfh"}
HYBRID_SYNS = {"hybrid", "flexible", "part-remote", "part remote"}
ONSITE_SYNS = {"onsite", "on-site", "on site", "office", "in office"}


def normalize_work_mode(value: str | None) -> str | None:
    if not value:
        return None
    mode = normalize_text(value)
    if mode in REMOTE_SYNS:
        return "remote"
    if mode in HYBRID_SYNS:
        return "hybrid"
    if mode in ONSITE_SYNS:
        return "on-site"
    return mode


JOB_TYPE_SYNS = {
    "fulltime": "full-time",
    "full time": "full-time",
    "parttime": "part-time",
    "part time": "part-time",
    "intern": "internship",
    "contractor": "contract",
}


def normalize_job_type(value: str | None) -> str | None:
    if not value:
        return None
    job_type = normalize_text(value).replace("_", "-")
    return JOB_TYPE_SYNS.get(job_type, job_type)


def normalize_level(value: str | None) -> str | None:
    if not value:
        return None
    return normalize_text(value)
