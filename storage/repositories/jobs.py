"""
Jobs Repository.

Responsibilities:
- Load a job with its company as a JobRecord.
- Query the bounded candidate pool for a reference job.
- Upsert jobs and companies from plain records.
- Bulk-load records into a database file.

Non-Responsibilities:
- No scoring.
- No similarity computation.

Invariant:
Repositories must not encode ranking decisions; candidate order is only
the newest-first seed the ranking stage starts from.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from pipelines.recommendation.candidate_selector import (
    ACTIVE_STATUS,
    DEFAULT_REGION,
    MAX_CANDIDATES,
    CandidateSupplier,
    ReferenceJobLoader,
)
from similarjobs.database import Company, Job, get_session, init_database
from similarjobs.records import CompanyInfo, JobRecord


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def company_to_record(company: Optional[Company]) -> Optional[CompanyInfo]:
    if company is None:
        return None
    return CompanyInfo(
        id=company.id,
        name=company.name,
        industries=tuple(company.industries or ()),
        company_size=company.company_size,
        is_featured=bool(company.is_featured),
        rating=company.rating,
        website=company.website,
        total_reviews=company.total_reviews or 0,
        logo=company.logo,
    )


def job_to_record(job: Job) -> JobRecord:
    return JobRecord(
        id=job.id,
        title=job.title or "",
        description=job.description,
        location=job.location,
        skills=tuple(job.skills) if job.skills is not None else None,
        job_type=job.job_type,
        experience_level=job.experience_level,
        salary_min=job.salary_min,
        salary_max=job.salary_max,
        salary=job.salary,
        remote_work=job.remote_work,
        department=job.department,
        company_id=job.company_id,
        company=company_to_record(job.company),
        is_featured=bool(job.is_featured),
        is_premium=bool(job.is_premium),
        created_at=_utc(job.created_at),
        views=job.views or 0,
        applications=job.applications or 0,
        region=job.region,
        status=job.status,
        valid_till=_utc(job.valid_till),
    )


class JobRepository(ReferenceJobLoader, CandidateSupplier):
    """SQLAlchemy-backed reference loader and candidate supplier."""

    def __init__(self, session: Session, now: Optional[datetime] = None):
        self.session = session
        self._now = now

    def load(self, job_id: str) -> Optional[JobRecord]:
        job = (
            self.session.query(Job)
            .options(joinedload(Job.company))
            .filter(Job.id == job_id)
            .first()
        )
        return job_to_record(job) if job is not None else None

    def fetch(self, reference: JobRecord, limit: int = MAX_CANDIDATES) -> List[JobRecord]:
        now = _utc(self._now) or datetime.now(timezone.utc)
        rows = (
            self.session.query(Job)
            .options(joinedload(Job.company))
            .filter(
                Job.id != reference.id,
                Job.status == ACTIVE_STATUS,
                Job.region == (reference.region or DEFAULT_REGION),
                or_(Job.valid_till.is_(None), Job.valid_till >= now),
            )
            .order_by(Job.created_at.desc())
            .limit(limit)
            .all()
        )
        return [job_to_record(row) for row in rows]

    def upsert(self, record: JobRecord) -> str:
        """Insert or update a job (and its company). Returns 'new' or 'updated'."""
        if record.company is not None and record.company_id:
            self._upsert_company(record.company_id, record.company)

        values: Dict[str, Any] = {
            "title": record.title,
            "description": record.description,
            "location": record.location,
            "skills": list(record.skills) if record.skills is not None else None,
            "job_type": record.job_type,
            "experience_level": record.experience_level,
            "salary": record.salary,
            "salary_min": record.salary_min,
            "salary_max": record.salary_max,
            "remote_work": record.remote_work,
            "department": record.department,
            "company_id": record.company_id,
            "is_featured": record.is_featured,
            "is_premium": record.is_premium,
            "views": record.views,
            "applications": record.applications,
            "status": record.status or ACTIVE_STATUS,
            "region": record.region or DEFAULT_REGION,
            "valid_till": _utc(record.valid_till),
        }
        if record.created_at is not None:
            values["created_at"] = _utc(record.created_at)

        job = self.session.query(Job).filter_by(id=record.id).first()
        if job is None:
            self.session.add(Job(id=record.id, **values))
            return "new"
        for key, value in values.items():
            setattr(job, key, value)
        return "updated"

    def _upsert_company(self, company_id: str, info: CompanyInfo) -> None:
        company = self.session.query(Company).filter_by(id=company_id).first()
        if company is None:
            company = Company(id=company_id)
            self.session.add(company)
        company.name = info.name or company.name or "Unknown"
        company.industries = list(info.industries)
        company.company_size = info.company_size
        company.website = info.website
        company.logo = info.logo
        company.is_featured = info.is_featured
        company.rating = info.rating
        company.total_reviews = info.total_reviews


def load_records(records: Iterable[JobRecord], db_path: Path) -> Tuple[int, int]:
    """
    Upsert records into the database at ``db_path`` in one transaction.

    The schema is created if missing. Returns ``(new, updated)`` counts;
    on any failure the transaction is rolled back and the error re-raised.
    """
    init_database(db_path)
    session = get_session(db_path)
    repo = JobRepository(session)
    new = updated = 0
    try:
        for record in records:
            if repo.upsert(record) == "new":
                new += 1
            else:
                updated += 1
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
    return new, updated
