"""
Candidate Selection Logic.

Responsibilities:
- Define the contracts for loading the reference job and supplying
  candidate jobs.
- Apply hard filters (active, not expired, same region, not the
  reference) and bound the pool, newest first.

Non-Responsibilities:
- No scoring.
- No similarity computation.
- No diversity decisions.

Invariant:
The candidate pool never contains the reference job and never exceeds
the configured bound.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from similarjobs.records import JobRecord

MAX_CANDIDATES = 200
DEFAULT_REGION = "india"
ACTIVE_STATUS = "active"


class ReferenceJobLoader(ABC):
    """Loads the full reference job, company details included."""

    @abstractmethod
    def load(self, job_id: str) -> Optional[JobRecord]:
        """Return the job or None when it does not exist."""


class CandidateSupplier(ABC):
    """Supplies the bounded candidate pool for a reference job."""

    @abstractmethod
    def fetch(self, reference: JobRecord, limit: int = MAX_CANDIDATES) -> List[JobRecord]:
        """Return active, unexpired jobs in the reference's region, newest first."""


def is_eligible(job: JobRecord, reference: JobRecord, now: datetime) -> bool:
    """Hard filters applied to every candidate."""
    if job.id == reference.id:
        return False
    if job.status is not None and job.status != ACTIVE_STATUS:
        return False
    if job.valid_till is not None and job.valid_till < now:
        return False
    return (job.region or DEFAULT_REGION) == (reference.region or DEFAULT_REGION)


def _recency_key(job: JobRecord) -> float:
    return job.created_at.timestamp() if job.created_at else float("-inf")


def bound_candidates(
    jobs: Iterable[JobRecord],
    reference: JobRecord,
    limit: int = MAX_CANDIDATES,
) -> List[JobRecord]:
    """Drop the reference and cap the pool, keeping supplier order."""
    pool: List[JobRecord] = []
    for job in jobs:
        if job.id == reference.id:
            continue
        pool.append(job)
        if len(pool) >= limit:
            break
    return pool


class InMemoryJobSource(ReferenceJobLoader, CandidateSupplier):
    """Both collaborator contracts over a list of records (tests, JSON input)."""

    def __init__(self, jobs: Iterable[JobRecord], now: Optional[datetime] = None):
        self._jobs = {job.id: job for job in jobs}
        self._now = now

    def load(self, job_id: str) -> Optional[JobRecord]:
        return self._jobs.get(job_id)

    def fetch(self, reference: JobRecord, limit: int = MAX_CANDIDATES) -> List[JobRecord]:
        now = self._now or datetime.now(timezone.utc)
        eligible = [job for job in self._jobs.values() if is_eligible(job, reference, now)]
        eligible.sort(key=_recency_key, reverse=True)
        return eligible[:limit]

    def __len__(self) -> int:
        return len(self._jobs)
