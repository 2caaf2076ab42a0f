"""Interest overlap between a viewer and an author."""

from typing import List, Sequence


def common_interests(viewer_interests: Sequence[str], author_interests: Sequence[str]) -> List[str]:
    """
    List viewer interests the author also declared.

    Comparison is exact but case-insensitive; order follows the viewer's list.

    Args:
        viewer_interests: Interests of the viewer
        author_interests: Interests of the author

    Returns:
        Shared interests, as spelled by the viewer
    """
    if not viewer_interests or not author_interests:
        return []
    author_set = {interest.lower() for interest in author_interests}
    return [interest for interest in viewer_interests if interest.lower() in author_set]


def interest_overlap_percentage(viewer_interests: Sequence[str], author_interests: Sequence[str]) -> int:
    """Share of the viewer's interests the author also has, rounded to a whole percent."""
    if not viewer_interests:
        return 0
    shared = common_interests(viewer_interests, author_interests)
    return int(round(len(shared) / len(viewer_interests) * 100))
