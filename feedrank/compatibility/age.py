"""
Age calculation from birth dates.

Ages are whole years, decremented when this year's birthday has not been
reached yet. The reference date is the current UTC calendar date unless one
is passed in, the same date the ranker derives from its reference time.
Input is not validated: a malformed date string raises ValueError from
parsing and a future birth date yields a negative age.
"""

import logging
from datetime import date, datetime, timezone
from typing import Dict, Optional, Tuple, Union

from ..schema.entities import parse_date, utc_now

logger = logging.getLogger(__name__)


def reference_date(now: Optional[datetime] = None) -> date:
    """
    UTC calendar date of a reference time.

    Args:
        now: Reference time, naive values are taken as UTC (default: current UTC time)

    Returns:
        date in UTC
    """
    if now is None:
        return utc_now().date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(timezone.utc).date()


def calculate_age(birthdate: Union[str, date, datetime], today: Optional[date] = None) -> int:
    """
    Compute the age in whole years.

    Args:
        birthdate: Birth date (date, datetime or ISO string)
        today: Reference date (default: current UTC date)

    Returns:
        Integer age

    Raises:
        ValueError: If birthdate is an unparseable string
    """
    birth = parse_date(birthdate)
    if birth is None:
        raise ValueError("birthdate is required to compute an age")
    today = today or reference_date()

    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


class AgeCache:
    """
    Memo of computed ages, keyed by (birthdate, reference date).

    Passed explicitly to the compatibility filter and the ranker when a
    batch repeats the same authors. Never shared implicitly.
    """

    def __init__(self):
        self._ages: Dict[Tuple[date, date], int] = {}
        self.hits = 0
        self.misses = 0

    def age(self, birthdate: Union[str, date, datetime], today: Optional[date] = None) -> int:
        """Return the cached age, computing it on first use."""
        birth = parse_date(birthdate)
        key = (birth, today or reference_date())
        if key in self._ages:
            self.hits += 1
            return self._ages[key]

        self.misses += 1
        value = calculate_age(birth, key[1])
        self._ages[key] = value
        return value

    def clear(self) -> None:
        self._ages.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._ages)


def resolve_age(
    birthdate: Union[str, date, datetime],
    today: Optional[date] = None,
    age_cache: Optional[AgeCache] = None
) -> int:
    """Compute an age, going through age_cache when one is given."""
    if age_cache is not None:
        return age_cache.age(birthdate, today)
    return calculate_age(birthdate, today)
