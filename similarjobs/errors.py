"""
Exceptions raised by the similar-jobs request pipeline.

Every exception carries the processing trace collected up to the point of
failure so callers can surface it when debug output is requested.
"""

from typing import List, Optional


class RecommendationError(Exception):
    """Base class for request-level failures."""

    status_code = 500

    def __init__(self, message: str, trace: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.trace: List[str] = list(trace or [])


class InvalidInputError(RecommendationError):
    """Malformed job id or limit; raised before any lookup."""

    status_code = 400


class JobNotFoundError(RecommendationError):
    """Reference job does not exist."""

    status_code = 404


class UpstreamError(RecommendationError):
    """Reference loader or candidate supplier failed."""

    status_code = 500


class RequestCancelled(RecommendationError):
    """Request was cancelled or ran past its deadline."""

    status_code = 503
