"""
Feed filters applied to candidate posts before ranking.

Filters narrow the candidate batch on explicit viewer choices (tags, date
range, premium authors only) and drop the viewer's own posts. They never
change scores.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional, Sequence, Tuple

from ..schema.entities import Post, Profile, as_str_tuple, utc_now
from ..scoring.components import hours_since

logger = logging.getLogger(__name__)

DATE_RANGES = {
    "today": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "all": None,
}


@dataclass(frozen=True)
class FeedFilters:
    """
    Viewer-selected feed filters.

    Attributes:
        tags: Keep posts carrying at least one of these tags (empty: no filter)
        date_range: "today", "week", "month" or "all"
        premium_only: Keep only posts by premium authors
        exclude_own_posts: Drop posts authored by the viewer
    """
    tags: Tuple[str, ...] = ()
    date_range: str = "all"
    premium_only: bool = False
    exclude_own_posts: bool = True

    def __post_init__(self):
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", as_str_tuple(self.tags))

    def validate(self) -> None:
        """Validate configuration values."""
        if self.date_range not in DATE_RANGES:
            raise ValueError(f"Unknown date_range: {self.date_range!r} "
                             f"(expected one of {sorted(DATE_RANGES)})")

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["tags"] = list(self.tags)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FeedFilters":
        filters = cls(
            tags=as_str_tuple(d.get("tags")),
            date_range=d.get("date_range", "all"),
            premium_only=bool(d.get("premium_only", False)),
            exclude_own_posts=bool(d.get("exclude_own_posts", True))
        )
        filters.validate()
        return filters

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FeedFilters":
        """Create from main config dictionary."""
        return cls.from_dict((config.get("feed") or {}).get("filters") or {})


def _has_any_tag(post_tags: Sequence[str], wanted: Sequence[str]) -> bool:
    wanted_lower = {t.lower() for t in wanted}
    return any(tag.lower() in wanted_lower for tag in post_tags)


def apply_filters(
    posts: Sequence[Post],
    viewer: Profile,
    filters: Optional[FeedFilters] = None,
    now: Optional[datetime] = None
) -> List[Post]:
    """
    Keep the posts that pass every active filter.

    Args:
        posts: Candidate posts
        viewer: Profile the feed is computed for
        filters: Filters to apply (default: only exclude the viewer's posts)
        now: Reference time for the date range (default: current UTC time)

    Returns:
        Filtered posts, input order preserved
    """
    filters = filters or FeedFilters()
    filters.validate()
    now = now or utc_now()
    max_age = DATE_RANGES[filters.date_range]

    kept = []
    for post in posts:
        if filters.exclude_own_posts and post.author_id == viewer.id:
            continue
        if filters.premium_only and not post.author.is_premium:
            continue
        if filters.tags and not _has_any_tag(post.tags, filters.tags):
            continue
        if max_age is not None and hours_since(post.created_at, now) > max_age.total_seconds() / 3600.0:
            continue
        kept.append(post)

    logger.debug(f"Filters kept {len(kept)}/{len(posts)} posts for viewer {viewer.id}")
    return kept
