import json
from datetime import date

import pytest

from feedrank.data_loading import load_records, load_profiles, load_posts

from conftest import PROJECT_ROOT


PROFILES_CSV = (
    "id,birthdate,gender,looking_for_gender,looking_for_age_min,looking_for_age_max,interests,plan\n"
    "u1,1990-01-01,male,any,20,40,travel|food,premium\n"
    "u2,,female,male,25,35,,free\n"
)

POSTS_CSV = (
    "id,author_id,tags,created_at,content\n"
    "p1,u1,travel|food,2026-10-19T08:00:00Z,Lisbon\n"
    "p2,u2,,2026-10-18T08:00:00+00:00,\n"
)


def test_load_profiles_from_csv(tmp_path):
    path = tmp_path / "profiles.csv"
    path.write_text(PROFILES_CSV)

    profiles = load_profiles(str(path))
    assert set(profiles) == {"u1", "u2"}
    assert profiles["u1"].birthdate == date(1990, 1, 1)
    assert profiles["u1"].interests == ("travel", "food")
    assert profiles["u1"].is_premium
    assert profiles["u2"].birthdate is None
    assert profiles["u2"].interests == ()
    assert profiles["u2"].looking_for_age_min == 25


def test_load_posts_resolves_author_ids(tmp_path):
    (tmp_path / "profiles.csv").write_text(PROFILES_CSV)
    (tmp_path / "posts.csv").write_text(POSTS_CSV)

    profiles = load_profiles(str(tmp_path / "profiles.csv"))
    posts = load_posts(str(tmp_path / "posts.csv"), profiles)

    assert [p.id for p in posts] == ["p1", "p2"]
    assert posts[0].author is profiles["u1"]
    assert posts[0].tags == ("travel", "food")
    assert posts[0].created_at.tzinfo is not None
    assert posts[1].tags == ()


def test_load_posts_with_embedded_author(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(json.dumps([{
        "id": "p1",
        "tags": ["music"],
        "created_at": "2026-10-19T08:00:00+00:00",
        "author": {"id": "a1", "plan": "premium", "interests": ["music"]}
    }]))

    posts = load_posts(str(path))
    assert posts[0].author.id == "a1"
    assert posts[0].author.looking_for_gender == "any"


def test_load_posts_unknown_author_raises(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text(json.dumps([{"id": "p1", "author_id": "ghost", "created_at": "2026-10-19T08:00:00"}]))
    with pytest.raises(ValueError, match="unknown author"):
        load_posts(str(path), {})


def test_load_records_from_yaml_mapping(tmp_path):
    path = tmp_path / "profiles.yaml"
    path.write_text("profiles:\n  - id: u1\n    interests: [books]\n")
    assert load_records(str(path), key="profiles") == [{"id": "u1", "interests": ["books"]}]


def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        load_records("does/not/exist.json")


def test_empty_file_raises(tmp_path):
    path = tmp_path / "posts.json"
    path.write_text("[]")
    with pytest.raises(ValueError, match="empty"):
        load_records(str(path))


def test_unsupported_format_raises(tmp_path):
    path = tmp_path / "posts.txt"
    path.write_text("p1")
    with pytest.raises(ValueError, match="Unsupported"):
        load_records(str(path))


def test_shipped_fixtures_load():
    profiles = load_profiles(str(PROJECT_ROOT / "data" / "profiles.json"))
    posts = load_posts(str(PROJECT_ROOT / "data" / "posts.json"), profiles)
    assert len(profiles) == 6
    assert len(posts) == 6
    assert profiles["u-thomas"].birthdate is None
