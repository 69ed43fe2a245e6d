from .candidate_selector import CandidateSupplier, InMemoryJobSource, ReferenceJobLoader
from .recommender import RecommendationResult, recommend_for_record, recommend_similar_jobs
from .weights import DEFAULT_CONFIG, ScoringConfig

__all__ = [
    "CandidateSupplier",
    "InMemoryJobSource",
    "ReferenceJobLoader",
    "RecommendationResult",
    "recommend_for_record",
    "recommend_similar_jobs",
    "DEFAULT_CONFIG",
    "ScoringConfig",
]
