"""Age calculation and viewer/author compatibility filtering."""

from .age import calculate_age, reference_date, AgeCache
from .filter import are_profiles_compatible

__all__ = ["calculate_age", "reference_date", "AgeCache", "are_profiles_compatible"]
