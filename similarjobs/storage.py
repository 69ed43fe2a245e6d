import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .records import JobRecord
from .schema import validate_job_record


def load_job_dicts(path: Path) -> List[Dict[str, Any]]:
    """Read jobs from a JSON file holding a list or {"jobs": [...]}."""
    with path.open("r", encoding="utf-8") as f:
        content = f.read().strip()
    if not content:
        return []
    data = json.loads(content)
    if isinstance(data, dict):
        data = data.get("jobs", [data] if "id" in data else [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a job list or an object with a 'jobs' list")
    return [item for item in data if isinstance(item, dict)]


def load_jobs(path: Path) -> Tuple[List[JobRecord], Dict[str, List[str]]]:
    """
    Load and validate jobs from a JSON file.

    Returns:
        Tuple of (valid records, {job id or index: validation errors})
    """
    records: List[JobRecord] = []
    rejected: Dict[str, List[str]] = {}
    for index, item in enumerate(load_job_dicts(path)):
        errors = validate_job_record(item)
        if errors:
            rejected[str(item.get("id") or f"#{index}")] = errors
            continue
        records.append(JobRecord.from_dict(item))
    return records, rejected


def save_results(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False, default=str)
