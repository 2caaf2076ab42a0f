"""
Weights applied to component scores before summation.

    total = tag_matches * W.tag_matches
          + recency * W.recency_score
          + mutual_interest * W.mutual_interest_boost
          + author_boost * W.author_boost

Weights are configured all at once: building them from a mapping requires
all four values, there is no partial override of the defaults.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any
import json

logger = logging.getLogger(__name__)

# Alternate key spellings accepted in config and JSON files
KEY_ALIASES = {
    "tagMatches": "tag_matches",
    "recencyScore": "recency_score",
    "mutualInterestBoost": "mutual_interest_boost",
    "authorBoost": "author_boost",
}


@dataclass(frozen=True)
class ScoringWeights:
    """
    Multipliers for the four component scores.

    Attributes:
        tag_matches: Weight of the tag-match count
        recency_score: Weight of the recency score
        mutual_interest_boost: Weight of the mutual-interest bonus
        author_boost: Weight of the premium-author bonus
    """
    tag_matches: float = 10.0
    recency_score: float = 5.0
    mutual_interest_boost: float = 5.0
    author_boost: float = 10.0

    def validate(self) -> None:
        """Validate that every weight is a positive number."""
        for name, value in asdict(self).items():
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ValueError(f"Weight {name} must be a number, got {value!r}")
            if value <= 0:
                raise ValueError(f"Weight {name} must be positive, got {value}")

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScoringWeights":
        """
        Create from dictionary holding all four weights.

        Args:
            d: Mapping with snake_case or camelCase weight names

        Returns:
            Validated ScoringWeights instance

        Raises:
            ValueError: If a weight is missing, unknown or not positive
        """
        normalized = {KEY_ALIASES.get(k, k): v for k, v in d.items()}
        expected = set(cls.__dataclass_fields__)

        unknown = set(normalized) - expected
        if unknown:
            raise ValueError(f"Unknown scoring weights: {sorted(unknown)}")
        missing = expected - set(normalized)
        if missing:
            raise ValueError(f"Scoring weights must be given together, missing: {sorted(missing)}")

        weights = cls(**{k: float(v) for k, v in normalized.items()})
        weights.validate()
        return weights

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScoringWeights":
        """Create from main config dictionary, falling back to the defaults."""
        weights_config = (config.get("scoring") or {}).get("weights")
        if not weights_config:
            return DEFAULT_WEIGHTS
        return cls.from_dict(weights_config)

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved scoring weights to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "ScoringWeights":
        """Load from JSON file."""
        with open(filepath, "r") as f:
            d = json.load(f)
        return cls.from_dict(d)


DEFAULT_WEIGHTS = ScoringWeights()
