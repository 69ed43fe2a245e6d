"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List

from similarjobs.records import CompanyInfo, JobRecord

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

ACME = CompanyInfo(
    id="company-acme",
    name="Acme Corp",
    industries=("Information Technology",),
    company_size="51-200",
    rating=3.9,
)


def new_id() -> str:
    return str(uuid.uuid4())


def build_job(**overrides) -> JobRecord:
    """A fully populated backend engineering posting; override any field."""
    fields: Dict[str, Any] = {
        "id": new_id(),
        "title": "Senior Backend Engineer",
        "description": "Build and run the services behind our hiring platform.",
        "location": "Bangalore, Karnataka, India",
        "skills": ("Python", "Django", "PostgreSQL", "AWS"),
        "job_type": "full-time",
        "experience_level": "senior",
        "salary_min": 2000000.0,
        "salary_max": 3000000.0,
        "remote_work": "hybrid",
        "department": "Engineering",
        "company_id": ACME.id,
        "company": ACME,
        "created_at": NOW - timedelta(days=3),
        "region": "india",
        "status": "active",
    }
    fields.update(overrides)
    return JobRecord(**fields)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_job():
    """Factory fixture for JobRecord instances."""
    return build_job


@pytest.fixture
def reference_job() -> JobRecord:
    return build_job(title="Senior Backend Engineer")


@pytest.fixture
def valid_job_dict() -> Dict[str, Any]:
    """Valid job record as it arrives from the job board API."""
    return {
        "id": "2f1c3b8e-6a55-4b1e-9d7c-3e2a1f0b9c11",
        "title": "Data Engineer",
        "description": "Own our ingestion pipelines.",
        "location": "Pune, Maharashtra, India",
        "skills": ["Python", "Spark", "SQL"],
        "jobType": "full-time",
        "experienceLevel": "mid",
        "salaryMin": 1200000,
        "salaryMax": 1800000,
        "remoteWork": "remote",
        "department": "Data",
        "companyId": "company-beta",
        "company": {
            "id": "company-beta",
            "name": "Beta Analytics",
            "industries": ["Analytics"],
            "companySize": "201-500",
            "isFeatured": True,
            "rating": 4.4,
        },
        "createdAt": "2025-05-30T09:00:00Z",
        "views": 250,
        "applications": 12,
    }


@pytest.fixture
def jobs_file(tmp_path, valid_job_dict) -> Path:
    """JSON file with a reference job, two candidates and one invalid entry."""
    reference = dict(valid_job_dict)
    similar = dict(valid_job_dict, id="7b9e2d44-1c3f-4a8b-8e6d-5f4a3b2c1d00", title="Senior Data Engineer")
    other = dict(
        valid_job_dict,
        id="c0ffee00-1234-4abc-8def-0123456789ab",
        title="Sales Manager",
        skills=["Negotiation"],
        department="Sales",
    )
    invalid = {"id": "broken", "jobType": "gig"}
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps({"jobs": [reference, similar, other, invalid]}, indent=2))
    return path


def company(company_id: str, name: str, **kwargs) -> CompanyInfo:
    return CompanyInfo(id=company_id, name=name, **kwargs)


def jobs_for_company(count: int, company_info: CompanyInfo, **overrides) -> List[JobRecord]:
    return [
        build_job(company_id=company_info.id, company=company_info, **overrides)
        for _ in range(count)
    ]
