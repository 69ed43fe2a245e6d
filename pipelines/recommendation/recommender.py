"""
Similar Jobs Orchestrator.

Responsibilities:
- Validate the request.
- Load the reference job and the candidate pool.
- Invoke scoring, diversity selection and formatting.
- Record a step-by-step trace and timing for debug output.

Non-Responsibilities:
- No database access of its own.
- No feature computation.
- No retries; a failing collaborator fails the request.

Invariant:
The request is processed as a single unit: it either returns the complete
ranked list or raises, never a partial result.
"""

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from similarjobs.errors import (
    JobNotFoundError,
    RecommendationError,
    RequestCancelled,
    UpstreamError,
)
from similarjobs.logger import get_logger
from similarjobs.records import JobRecord, ScoredCandidate
from similarjobs.schema import DEFAULT_LIMIT, MAX_LIMIT, parse_request

from .candidate_selector import MAX_CANDIDATES, CandidateSupplier, ReferenceJobLoader, bound_candidates
from .diversity import company_cap, select_diverse
from .formatter import format_results
from .scoring import score_candidates
from .weights import DEFAULT_CONFIG, ScoringConfig

ALGORITHM = "multi-factor-similarity-v2"

logger = get_logger()


class Deadline:
    """Cancellation check combining an optional event and time budget."""

    def __init__(self, timeout: Optional[float] = None, cancel_event: Optional[threading.Event] = None):
        self._expires = time.monotonic() + timeout if timeout is not None else None
        self._event = cancel_event

    def check(self) -> None:
        if self._event is not None and self._event.is_set():
            raise RequestCancelled("Request was cancelled")
        if self._expires is not None and time.monotonic() >= self._expires:
            raise RequestCancelled("Request deadline exceeded")


@dataclass
class RecommendationResult:
    jobs: List[Dict[str, Any]]
    selected: List[ScoredCandidate]
    total_candidates: int
    max_per_company: int
    processing_time_ms: float
    debug: bool = False
    trace: List[str] = field(default_factory=list)
    started_at: Optional[str] = None

    @property
    def message(self) -> str:
        if self.total_candidates == 0:
            return "No similar jobs found"
        return "Similar jobs retrieved successfully"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": True,
            "message": self.message,
            "data": self.jobs,
            "metadata": {
                "total_candidates": self.total_candidates,
                "returned_jobs": len(self.jobs),
                "algorithm": ALGORITHM,
                "processing_time_ms": self.processing_time_ms,
                "diversity_applied": self.total_candidates > 0,
                "max_per_company": self.max_per_company,
            },
        }
        if self.debug:
            payload["debug"] = {
                "algorithm": ALGORITHM,
                "start_time": self.started_at,
                "steps": list(self.trace),
                "processing_time_ms": self.processing_time_ms,
                "total_candidates": self.total_candidates,
                "returned_jobs": len(self.jobs),
            }
        return payload


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def recommend_similar_jobs(
    job_id: Any,
    limit: Any = None,
    debug: Any = False,
    *,
    loader: ReferenceJobLoader,
    supplier: CandidateSupplier,
    config: ScoringConfig = DEFAULT_CONFIG,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
    candidate_limit: int = MAX_CANDIDATES,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    now: Optional[datetime] = None,
) -> RecommendationResult:
    """
    Rank jobs similar to ``job_id`` and return a diversified top-K list.

    Raises:
        InvalidInputError: malformed id, limit or debug flag
        JobNotFoundError: reference job does not exist
        UpstreamError: loader or supplier failed
        RequestCancelled: ``cancel_event`` set or ``timeout`` exceeded
        RecommendationError: any other failure, with the cause chained
    """
    start = time.perf_counter()
    started_at = datetime.now(timezone.utc).isoformat()
    trace: List[str] = []
    deadline = Deadline(timeout, cancel_event)
    logger.record_request()

    try:
        request = parse_request(job_id, limit, debug, default_limit, max_limit)
        trace.append(f"Processing request for job {request.job_id} with limit {request.limit}")
        deadline.check()

        try:
            reference = loader.load(request.job_id)
        except Exception as e:
            raise UpstreamError(f"Failed to load reference job: {e}") from e
        if reference is None:
            trace.append("Job not found")
            raise JobNotFoundError("Job not found")
        trace.append(f"Found job: {reference.title} at {reference.company_name or 'Unknown Company'}")
        deadline.check()

        try:
            fetched = supplier.fetch(reference, candidate_limit)
        except Exception as e:
            raise UpstreamError(f"Failed to fetch candidate jobs: {e}") from e
        candidates = bound_candidates(fetched or [], reference, candidate_limit)
        trace.append(f"Found {len(candidates)} candidate jobs for analysis")
        deadline.check()

        cap = company_cap(request.limit)
        if not candidates:
            trace.append("No candidate jobs found")
            result = _result([], [], 0, cap, start, request.debug, trace, started_at)
            logger.record_request_success(0)
            return result

        scored = score_candidates(
            reference, candidates, config, now=now, workers=workers, check_cancelled=deadline.check
        )
        trace.append(f"Scored {len(scored)} candidates")
        deadline.check()

        selected = select_diverse(scored, request.limit, cap)
        trace.append(f"Selected {len(selected)} jobs after diversity filtering (max {cap} per company)")

        jobs = format_results(selected, request.debug)
        deadline.check()

        result = _result(jobs, selected, len(candidates), cap, start, request.debug, trace, started_at)
        logger.record_request_success(len(candidates))
        logger.info(
            "Similar jobs computed",
            job_id=request.job_id,
            candidates=len(candidates),
            returned=len(jobs),
            processing_time_ms=result.processing_time_ms,
        )
        return result

    except RecommendationError as e:
        trace.append(f"Error occurred: {e.message}")
        e.trace = trace
        logger.record_request_failure(type(e).__name__)
        if isinstance(e, (UpstreamError, RequestCancelled)):
            logger.error("Similar jobs request failed", job_id=str(job_id), error=e.message)
        else:
            logger.debug("Similar jobs request rejected", job_id=str(job_id), error=e.message)
        raise
    except Exception as e:
        trace.append(f"Error occurred: {e}")
        logger.record_request_failure(type(e).__name__)
        logger.error("Similar jobs request failed", job_id=str(job_id), error=str(e))
        raise RecommendationError(f"Failed to retrieve similar jobs: {e}", trace) from e


def _result(
    jobs: List[Dict[str, Any]],
    selected: List[ScoredCandidate],
    total: int,
    cap: int,
    start: float,
    debug: bool,
    trace: List[str],
    started_at: str,
) -> RecommendationResult:
    elapsed = _elapsed_ms(start)
    trace.append(f"Processing completed in {elapsed}ms")
    return RecommendationResult(
        jobs=jobs,
        selected=selected,
        total_candidates=total,
        max_per_company=cap,
        processing_time_ms=elapsed,
        debug=debug,
        trace=trace,
        started_at=started_at,
    )


def recommend_for_record(
    reference: JobRecord,
    candidates: List[JobRecord],
    limit: int = DEFAULT_LIMIT,
    config: ScoringConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[ScoredCandidate]:
    """Score and diversify an in-memory pool without the request layer."""
    pool = bound_candidates(candidates, reference)
    scored = score_candidates(reference, pool, config, now=now)
    return select_diverse(scored, limit)
