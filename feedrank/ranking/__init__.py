"""Relevance aggregation, feed filters and ranking."""

from .filters import FeedFilters, apply_filters
from .ranker import compute_score, score_breakdown, attach_scores, FeedRanker

__all__ = [
    "FeedFilters",
    "apply_filters",
    "compute_score",
    "score_breakdown",
    "attach_scores",
    "FeedRanker",
]
