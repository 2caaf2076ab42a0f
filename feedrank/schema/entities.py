"""
Records consumed and produced by the feed ranking engine.

Profiles and posts are supplied by the external data layer for the duration
of one scoring call. Nothing in this package creates, mutates or persists
them; ScoredPost values are rebuilt on every feed computation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, Union


ANY_GENDER = "any"

DEFAULT_AGE_MIN = 18
DEFAULT_AGE_MAX = 99


class Plan(Enum):
    """Subscription plan of a profile."""
    FREE = "free"
    PREMIUM = "premium"


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Coerce a birth date to a calendar date.

    Args:
        value: ISO string, date, datetime or None

    Returns:
        date instance, or None when no value is given

    Raises:
        ValueError: If a string is not a valid ISO date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Timestamps such as "1990-05-01T00:00:00Z" keep only their date part
    return date.fromisoformat(str(value)[:10])


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Coerce a post timestamp to a datetime.

    Args:
        value: ISO string or datetime

    Returns:
        datetime instance (timezone-aware if the input carried an offset)

    Raises:
        ValueError: If a string is not a valid ISO timestamp
    """
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _int_or_default(value: Any, default: int) -> int:
    return default if value is None or value == "" else int(value)


def as_str_tuple(value: Any) -> Tuple[str, ...]:
    """Coerce a tag or interest list to a tuple of strings."""
    # A lone string is one item, not a sequence of characters
    if isinstance(value, str):
        return (value,) if value else ()
    return tuple(value or ())


@dataclass(frozen=True)
class Profile:
    """
    Viewer or author profile.

    Attributes:
        id: Identity key
        birthdate: Birth date, None skips age-based filters
        gender: Declared gender
        looking_for_gender: Gender sought, "any" is a wildcard
        looking_for_age_min: Lower bound of acceptable partner age
        looking_for_age_max: Upper bound of acceptable partner age
        interests: Free-text interests (compared case-insensitively)
        plan: "free" or "premium"
        full_name: Display name, informational only
    """
    id: str
    birthdate: Optional[date] = None
    gender: Optional[str] = None
    looking_for_gender: str = ANY_GENDER
    looking_for_age_min: int = DEFAULT_AGE_MIN
    looking_for_age_max: int = DEFAULT_AGE_MAX
    interests: Tuple[str, ...] = ()
    plan: str = Plan.FREE.value
    full_name: Optional[str] = None

    def __post_init__(self):
        """Normalize loosely typed input."""
        # frozen dataclass: normalized values go through object.__setattr__
        if isinstance(self.birthdate, (str, datetime)):
            object.__setattr__(self, "birthdate", parse_date(self.birthdate))
        if not isinstance(self.interests, tuple):
            object.__setattr__(self, "interests", as_str_tuple(self.interests))
        if isinstance(self.plan, Plan):
            object.__setattr__(self, "plan", self.plan.value)

    @property
    def is_premium(self) -> bool:
        return self.plan == Plan.PREMIUM.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "birthdate": self.birthdate.isoformat() if self.birthdate else None,
            "gender": self.gender,
            "looking_for_gender": self.looking_for_gender,
            "looking_for_age_min": self.looking_for_age_min,
            "looking_for_age_max": self.looking_for_age_max,
            "interests": list(self.interests),
            "plan": self.plan
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """Create from dictionary, applying database defaults for absent fields."""
        return cls(
            id=str(data["id"]),
            birthdate=parse_date(data.get("birthdate")),
            gender=data.get("gender"),
            looking_for_gender=data.get("looking_for_gender") or ANY_GENDER,
            looking_for_age_min=_int_or_default(data.get("looking_for_age_min"), DEFAULT_AGE_MIN),
            looking_for_age_max=_int_or_default(data.get("looking_for_age_max"), DEFAULT_AGE_MAX),
            interests=as_str_tuple(data.get("interests")),
            plan=data.get("plan") or Plan.FREE.value,
            full_name=data.get("full_name")
        )


@dataclass(frozen=True)
class Post:
    """
    Candidate feed post with an embedded author snapshot.

    Attributes:
        id: Identity key
        tags: Ordered tags, treated as a set for matching
        created_at: Creation timestamp
        author: Author profile snapshot (not a live join)
        content: Post body, informational only
    """
    id: str
    tags: Tuple[str, ...]
    created_at: datetime
    author: Profile
    content: str = ""

    def __post_init__(self):
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", as_str_tuple(self.tags))
        if not isinstance(self.created_at, datetime):
            object.__setattr__(self, "created_at", parse_timestamp(self.created_at))

    @property
    def author_id(self) -> str:
        return self.author.id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "content": self.content,
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat(),
            "author": self.author.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], author: Optional[Profile] = None) -> "Post":
        """
        Create from dictionary.

        Args:
            data: Post record; must embed an "author" mapping unless
                author is given
            author: Resolved author snapshot, overrides any embedded one

        Returns:
            Post instance
        """
        if author is None:
            author = Profile.from_dict(data["author"])
        return cls(
            id=str(data["id"]),
            tags=as_str_tuple(data.get("tags")),
            created_at=parse_timestamp(data["created_at"]),
            author=author,
            content=data.get("content") or ""
        )


@dataclass
class ScoreBreakdown:
    """
    Weighted component contributions behind a relevance score.

    All values are post-weighting; total is their clamped sum, or 0 when the
    author is incompatible with the viewer.
    """
    compatible: bool
    tag_matches: float = 0.0
    recency: float = 0.0
    mutual_interest: float = 0.0
    author_boost: float = 0.0
    common_interests: List[str] = field(default_factory=list)

    @property
    def total(self) -> float:
        if not self.compatible:
            return 0.0
        return max(0.0, self.tag_matches + self.recency + self.mutual_interest + self.author_boost)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compatible": self.compatible,
            "tag_matches": self.tag_matches,
            "recency": self.recency,
            "mutual_interest": self.mutual_interest,
            "author_boost": self.author_boost,
            "common_interests": list(self.common_interests),
            "total": self.total
        }


@dataclass(frozen=True)
class ScoredPost:
    """A post augmented with its relevance score for one viewer."""
    post: Post
    relevance_score: float
    breakdown: Optional[ScoreBreakdown] = None

    @property
    def id(self) -> str:
        return self.post.id

    @property
    def created_at(self) -> datetime:
        return self.post.created_at

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the post and its score into one record."""
        result = self.post.to_dict()
        result["relevance_score"] = self.relevance_score
        if self.breakdown is not None:
            result["breakdown"] = self.breakdown.to_dict()
        return result


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
