from feedrank.schema import Profile, Post

from conftest import NOW


def test_profile_single_interest_string_is_one_interest():
    profile = Profile.from_dict({"id": "x", "interests": "travel"})
    assert profile.interests == ("travel",)
    assert Profile(id="y", interests="music").interests == ("music",)


def test_profile_missing_interests_default_to_empty():
    assert Profile.from_dict({"id": "x", "interests": None}).interests == ()
    assert Profile.from_dict({"id": "x", "interests": ""}).interests == ()


def test_post_single_tag_string_is_one_tag():
    post = Post.from_dict({
        "id": "p",
        "tags": "travel",
        "created_at": "2026-10-19T08:00:00Z",
        "author": {"id": "a"}
    })
    assert post.tags == ("travel",)
    assert Post(id="q", tags="food", created_at=NOW, author=Profile(id="a")).tags == ("food",)
