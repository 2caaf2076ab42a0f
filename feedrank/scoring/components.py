"""
Component scorers for post relevance.

Each scorer returns a non-negative raw contribution, before weighting:

- Tag matches: number of post tags fuzzy-matching the viewer's interests
  (unbounded, in practice bounded by the tag count)
- Recency: linear decay from 5 to 0 over the first 48 hours
- Mutual interest: flat 5 when the post's tags match both the viewer's and
  the author's interests
- Author boost: flat 10 for premium authors

Tag/interest matching is case-insensitive and substring-based in either
direction: "hiking" matches "hiking trips" and vice versa.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from ..schema.entities import Plan, utc_now

RECENCY_WINDOW_HOURS = 48.0
RECENCY_MAX_SCORE = 5.0
MUTUAL_INTEREST_BONUS = 5.0
PREMIUM_AUTHOR_BONUS = 10.0


def fuzzy_match(a: str, b: str) -> bool:
    """Return True if either string contains the other, ignoring case."""
    a_lower = a.lower()
    b_lower = b.lower()
    return a_lower in b_lower or b_lower in a_lower


def calculate_tag_matches(post_tags: Sequence[str], interests: Sequence[str]) -> int:
    """
    Count post tags matching at least one interest.

    Args:
        post_tags: Tags of the post (duplicates are counted)
        interests: Interests to match against

    Returns:
        Number of matching tags, 0 when either input is empty
    """
    if not post_tags or not interests:
        return 0
    return sum(
        1 for tag in post_tags
        if any(fuzzy_match(tag, interest) for interest in interests)
    )


def hours_since(created_at: datetime, now: Optional[datetime] = None) -> float:
    """
    Hours elapsed between created_at and now.

    Naive datetimes are interpreted as UTC, so aware and naive values
    can be mixed.
    """
    now = now or utc_now()
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - created_at).total_seconds() / 3600.0


def calculate_recency_score(created_at: datetime, now: Optional[datetime] = None) -> float:
    """
    Score a post by age: 5 when brand new, 0 after 48 hours.

    Posts past the window are not excluded, only this component drops to 0.

    Args:
        created_at: Post creation time
        now: Reference time (default: current UTC time)

    Returns:
        Recency score
    """
    hours = hours_since(created_at, now)
    return max(0.0, RECENCY_WINDOW_HOURS - hours) / RECENCY_WINDOW_HOURS * RECENCY_MAX_SCORE


def calculate_mutual_interest_boost(
    post_tags: Sequence[str],
    author_interests: Sequence[str],
    viewer_interests: Sequence[str]
) -> float:
    """Bonus when the post's tags resonate with both viewer and author."""
    viewer_matches = calculate_tag_matches(post_tags, viewer_interests)
    author_matches = calculate_tag_matches(post_tags, author_interests)
    if viewer_matches > 0 and author_matches > 0:
        return MUTUAL_INTEREST_BONUS
    return 0.0


def calculate_author_boost(author_plan: Optional[str]) -> float:
    """Bonus for premium authors."""
    return PREMIUM_AUTHOR_BONUS if author_plan == Plan.PREMIUM.value else 0.0
