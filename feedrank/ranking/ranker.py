"""
Relevance aggregation and feed ranking.

Per post:
    0                                       if the author is incompatible
    max(0, sum(component_i * weight_i))     otherwise

Over the batch: posts scoring 0 are dropped (every incompatible post and
every post with no relevance on any component), survivors are sorted by
score descending, then by created_at descending. Python's sort is stable,
so posts with equal keys keep their input order and repeated runs on the
same input give the same order.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Sequence

from ..compatibility.age import AgeCache, reference_date
from ..compatibility.filter import are_profiles_compatible
from ..schema.entities import Post, Profile, ScoreBreakdown, ScoredPost, utc_now
from ..scoring.components import (
    calculate_tag_matches,
    calculate_recency_score,
    calculate_mutual_interest_boost,
    calculate_author_boost,
)
from ..scoring.interests import common_interests
from ..scoring.weights import ScoringWeights, DEFAULT_WEIGHTS
from .filters import FeedFilters, apply_filters

logger = logging.getLogger(__name__)


def _sort_timestamp(created_at: datetime) -> float:
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.timestamp()


def score_breakdown(
    post: Post,
    viewer: Profile,
    weights: Optional[ScoringWeights] = None,
    now: Optional[datetime] = None,
    age_cache: Optional[AgeCache] = None
) -> ScoreBreakdown:
    """
    Compute the weighted components of a post's relevance for viewer.

    Args:
        post: Candidate post
        viewer: Profile the feed is computed for
        weights: Component weights (default: DEFAULT_WEIGHTS)
        now: Reference time (default: current UTC time)
        age_cache: Optional memo for age computations

    Returns:
        ScoreBreakdown; all components are 0 when incompatible
    """
    weights = weights or DEFAULT_WEIGHTS
    now = now or utc_now()
    author = post.author

    if not are_profiles_compatible(viewer, author, today=reference_date(now), age_cache=age_cache):
        return ScoreBreakdown(compatible=False)

    return ScoreBreakdown(
        compatible=True,
        tag_matches=calculate_tag_matches(post.tags, viewer.interests) * weights.tag_matches,
        recency=calculate_recency_score(post.created_at, now) * weights.recency_score,
        mutual_interest=calculate_mutual_interest_boost(
            post.tags, author.interests, viewer.interests
        ) * weights.mutual_interest_boost,
        author_boost=calculate_author_boost(author.plan) * weights.author_boost,
        common_interests=common_interests(viewer.interests, author.interests)
    )


def compute_score(
    post: Post,
    viewer: Profile,
    weights: Optional[ScoringWeights] = None,
    now: Optional[datetime] = None,
    age_cache: Optional[AgeCache] = None
) -> float:
    """
    Compute the relevance score of a post for viewer.

    Returns exactly 0 when the author is incompatible with the viewer,
    never a negative value.
    """
    return score_breakdown(post, viewer, weights, now, age_cache).total


def attach_scores(
    posts: Sequence[Post],
    viewer: Profile,
    weights: Optional[ScoringWeights] = None,
    now: Optional[datetime] = None,
    age_cache: Optional[AgeCache] = None,
    include_breakdown: bool = False
) -> List[ScoredPost]:
    """
    Score, filter and rank a batch of posts for viewer.

    Args:
        posts: Candidate posts
        viewer: Profile the feed is computed for
        weights: Component weights (default: DEFAULT_WEIGHTS)
        now: Reference time shared by the whole batch (default: current UTC time)
        age_cache: Optional memo for age computations
        include_breakdown: Attach the component breakdown to each result

    Returns:
        Posts with a positive score, by score then created_at, both descending
    """
    now = now or utc_now()

    scored = []
    for post in posts:
        breakdown = score_breakdown(post, viewer, weights, now, age_cache)
        score = breakdown.total
        if score <= 0:
            continue
        scored.append(ScoredPost(
            post=post,
            relevance_score=score,
            breakdown=breakdown if include_breakdown else None
        ))

    scored.sort(key=lambda sp: (sp.relevance_score, _sort_timestamp(sp.created_at)), reverse=True)
    logger.debug(f"Ranked {len(scored)}/{len(posts)} posts for viewer {viewer.id}")
    return scored


class FeedRanker:
    """
    Ranks a viewer's feed with a fixed weights and filters configuration.

    Attributes:
        weights: ScoringWeights applied to component scores
        filters: FeedFilters applied before scoring
        limit: Maximum number of ranked posts returned (None: all)
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        filters: Optional[FeedFilters] = None,
        limit: Optional[int] = None
    ):
        self.weights = weights or DEFAULT_WEIGHTS
        self.weights.validate()
        self.filters = filters or FeedFilters()
        self.filters.validate()
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        self.limit = limit
        logger.info(f"Initialized FeedRanker with weights={self.weights.to_dict()}, "
                    f"filters={self.filters.to_dict()}, limit={limit}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FeedRanker":
        """Create from main config dictionary."""
        return cls(
            weights=ScoringWeights.from_config(config),
            filters=FeedFilters.from_config(config),
            limit=(config.get("feed") or {}).get("limit")
        )

    def rank(
        self,
        posts: Sequence[Post],
        viewer: Profile,
        now: Optional[datetime] = None,
        age_cache: Optional[AgeCache] = None,
        include_breakdown: bool = False
    ) -> List[ScoredPost]:
        """
        Filter and rank posts for viewer.

        Args:
            posts: Candidate posts
            viewer: Profile the feed is computed for
            now: Reference time (default: current UTC time)
            age_cache: Optional memo for age computations
            include_breakdown: Attach the component breakdown to each result

        Returns:
            Ranked posts, truncated to limit when set
        """
        now = now or utc_now()
        candidates = apply_filters(posts, viewer, self.filters, now)
        ranked = attach_scores(candidates, viewer, self.weights, now, age_cache, include_breakdown)

        if self.limit is not None:
            ranked = ranked[:self.limit]

        logger.info(f"Feed for viewer {viewer.id}: {len(posts)} candidates, "
                    f"{len(candidates)} after filters, {len(ranked)} ranked")
        return ranked
