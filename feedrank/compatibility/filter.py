"""
Viewer/author compatibility gate.

Decides whether an author's posts may appear in a viewer's feed, based on
the gender and age preferences both parties declared. Evaluated once per
(viewer, author) pair on every feed computation; nothing is persisted.

Checks, in order (the first failure short-circuits):
1. viewer.looking_for_gender is "any" or equals author.gender
2. author age (when known) lies in the viewer's age range
3. viewer age (when known) lies in the author's age range, but only when
   the author's looking_for_gender is not "any"

Check 3 is not symmetric with check 1: a permissive author gender
preference skips the viewer-age test entirely.
"""

import logging
from datetime import date
from typing import Optional

from ..schema.entities import ANY_GENDER, Profile
from .age import AgeCache, resolve_age

logger = logging.getLogger(__name__)


def _age_in_range(age: int, age_min: int, age_max: int) -> bool:
    return age_min <= age <= age_max


def are_profiles_compatible(
    viewer: Profile,
    author: Profile,
    today: Optional[date] = None,
    age_cache: Optional[AgeCache] = None
) -> bool:
    """
    Check whether author's content can be shown to viewer.

    Args:
        viewer: Profile the feed is computed for
        author: Profile that created the candidate post
        today: Reference date for age computation (default: current UTC date)
        age_cache: Optional memo for repeated age computations

    Returns:
        True if every check passes
    """
    if viewer.looking_for_gender != ANY_GENDER and author.gender != viewer.looking_for_gender:
        logger.debug(f"Author {author.id} rejected: gender {author.gender!r} "
                     f"!= {viewer.looking_for_gender!r}")
        return False

    if author.birthdate:
        author_age = resolve_age(author.birthdate, today, age_cache)
        if not _age_in_range(author_age, viewer.looking_for_age_min, viewer.looking_for_age_max):
            logger.debug(f"Author {author.id} rejected: age {author_age} outside "
                         f"[{viewer.looking_for_age_min}, {viewer.looking_for_age_max}]")
            return False

    if viewer.birthdate and author.looking_for_gender != ANY_GENDER:
        viewer_age = resolve_age(viewer.birthdate, today, age_cache)
        if not _age_in_range(viewer_age, author.looking_for_age_min, author.looking_for_age_max):
            logger.debug(f"Author {author.id} rejected: viewer age {viewer_age} outside "
                         f"[{author.looking_for_age_min}, {author.looking_for_age_max}]")
            return False

    return True
