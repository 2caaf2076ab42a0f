"""Profile, post and scored-post records."""

from .entities import (
    ANY_GENDER,
    Plan,
    Profile,
    Post,
    ScoreBreakdown,
    ScoredPost,
    parse_date,
    parse_timestamp,
)

__all__ = [
    "ANY_GENDER",
    "Plan",
    "Profile",
    "Post",
    "ScoreBreakdown",
    "ScoredPost",
    "parse_date",
    "parse_timestamp",
]
