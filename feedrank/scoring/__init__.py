"""Component scorers and scoring weights."""

from .components import (
    calculate_tag_matches,
    calculate_recency_score,
    calculate_mutual_interest_boost,
    calculate_author_boost,
)
from .interests import common_interests, interest_overlap_percentage
from .weights import ScoringWeights, DEFAULT_WEIGHTS

__all__ = [
    "calculate_tag_matches",
    "calculate_recency_score",
    "calculate_mutual_interest_boost",
    "calculate_author_boost",
    "common_interests",
    "interest_overlap_percentage",
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
]
