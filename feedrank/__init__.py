"""
Feed Relevance Scoring and Ranking

This package ranks candidate posts for a viewer of a dating/social feed.

Pipeline (each stage a pure function over plain records):
- Age calculation from birth dates
- Compatibility filtering on mutually declared gender/age preferences
- Component scoring (tag overlap, recency, mutual interest, premium author)
- Weighted aggregation and deterministic ranking

No stage performs I/O or keeps state between calls.
"""

from .compatibility import calculate_age, are_profiles_compatible, AgeCache
from .ranking import compute_score, attach_scores, FeedRanker, FeedFilters
from .schema import Profile, Post, ScoredPost
from .scoring import ScoringWeights, DEFAULT_WEIGHTS

__version__ = "1.0.0"

__all__ = [
    "calculate_age",
    "are_profiles_compatible",
    "AgeCache",
    "compute_score",
    "attach_scores",
    "FeedRanker",
    "FeedFilters",
    "Profile",
    "Post",
    "ScoredPost",
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
]
