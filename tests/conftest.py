"""Pytest fixtures."""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from feedrank.schema import Profile, Post

PROJECT_ROOT = Path(__file__).parent.parent

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_profile():
    def _make(id="author", **kwargs):
        return Profile(id=id, **kwargs)
    return _make


@pytest.fixture
def make_post():
    def _make(id="post", tags=(), hours_ago=0.0, author=None, **kwargs):
        author = author or Profile(id=f"author-of-{id}")
        return Post(
            id=id,
            tags=tuple(tags),
            created_at=NOW - timedelta(hours=hours_ago),
            author=author,
            **kwargs
        )
    return _make


@pytest.fixture
def viewer():
    """Viewer open to any gender, no birth date."""
    return Profile(
        id="viewer",
        gender="female",
        looking_for_gender="any",
        looking_for_age_min=25,
        looking_for_age_max=40,
        interests=("travel", "food", "music")
    )


@pytest.fixture
def premium_author():
    return Profile(
        id="premium-author",
        gender="male",
        plan="premium",
        interests=("travel", "music")
    )


@pytest.fixture
def sample_config(tmp_path):
    """Config file pointing at the fixture data shipped with the repo."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "global:\n"
        "  log_level: INFO\n"
        "data:\n"
        f"  profiles: {{path: {PROJECT_ROOT / 'data' / 'profiles.json'}}}\n"
        f"  posts: {{path: {PROJECT_ROOT / 'data' / 'posts.json'}}}\n"
        "scoring:\n"
        "  weights: {tag_matches: 10, recency_score: 5, mutual_interest_boost: 5, author_boost: 10}\n"
        "feed:\n"
        "  filters: {exclude_own_posts: true}\n"
        "  limit: null\n"
        "evaluation:\n"
        "  top_k: 3\n"
        "  alternative_weights: {tag_matches: 5, recency_score: 10, mutual_interest_boost: 5, author_boost: 5}\n"
    )
    return config_path


def birthdate_for_age(age, today=TODAY):
    """Birth date making someone exactly age years old on today."""
    return date(today.year - age, today.month, today.day)
