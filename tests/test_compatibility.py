from datetime import date, datetime, timedelta, timezone

import pytest

from feedrank.compatibility import calculate_age, are_profiles_compatible, reference_date, AgeCache

from conftest import TODAY, birthdate_for_age


def test_age_on_birthday():
    assert calculate_age("1990-10-19", today=TODAY) == 36


def test_age_day_before_birthday():
    assert calculate_age("1990-10-20", today=TODAY) == 35


def test_age_accepts_date_and_datetime():
    assert calculate_age(date(1990, 10, 18), today=TODAY) == 36
    assert calculate_age(datetime(1990, 10, 18, 23, 59), today=TODAY) == 36


def test_age_leap_day_birthday():
    assert calculate_age(date(2000, 2, 29), today=date(2026, 2, 28)) == 25
    assert calculate_age(date(2000, 2, 29), today=date(2026, 3, 1)) == 26


def test_age_future_birthdate_is_negative():
    assert calculate_age(date(2030, 1, 1), today=TODAY) == -4


def test_age_malformed_date_raises():
    with pytest.raises(ValueError):
        calculate_age("not-a-date", today=TODAY)


def test_age_cache_memoizes():
    cache = AgeCache()
    assert cache.age("1990-10-19", TODAY) == 36
    assert cache.age(date(1990, 10, 19), TODAY) == 36
    assert cache.misses == 1
    assert cache.hits == 1
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_gender_mismatch_is_incompatible(make_profile):
    viewer = make_profile("viewer", looking_for_gender="male")
    author = make_profile("author", gender="female")
    assert not are_profiles_compatible(viewer, author, today=TODAY)


def test_gender_wildcard_accepts_anyone(make_profile):
    viewer = make_profile("viewer", looking_for_gender="any")
    author = make_profile("author", gender="other")
    assert are_profiles_compatible(viewer, author, today=TODAY)


def test_author_too_old_is_incompatible(make_profile):
    viewer = make_profile("viewer", looking_for_age_min=25, looking_for_age_max=40)
    author = make_profile("author", birthdate=birthdate_for_age(60))
    assert not are_profiles_compatible(viewer, author, today=TODAY)


def test_author_age_bounds_are_inclusive(make_profile):
    viewer = make_profile("viewer", looking_for_age_min=25, looking_for_age_max=40)
    assert are_profiles_compatible(viewer, make_profile(birthdate=birthdate_for_age(25)), today=TODAY)
    assert are_profiles_compatible(viewer, make_profile(birthdate=birthdate_for_age(40)), today=TODAY)
    assert not are_profiles_compatible(viewer, make_profile(birthdate=birthdate_for_age(41)), today=TODAY)


def test_author_without_birthdate_skips_age_check(make_profile):
    viewer = make_profile("viewer", looking_for_age_min=25, looking_for_age_max=26)
    assert are_profiles_compatible(viewer, make_profile("author"), today=TODAY)


def test_viewer_outside_author_range_is_incompatible(make_profile):
    viewer = make_profile("viewer", gender="female", birthdate=birthdate_for_age(50))
    author = make_profile(
        "author", gender="male", looking_for_gender="female",
        looking_for_age_min=20, looking_for_age_max=30
    )
    assert not are_profiles_compatible(viewer, author, today=TODAY)


def test_author_wildcard_skips_viewer_age_check(make_profile):
    # The viewer-age check only runs when the author's gender preference is
    # not "any"; the viewer's own wildcard does not skip the gender check.
    viewer = make_profile("viewer", gender="female", birthdate=birthdate_for_age(50))
    author = make_profile(
        "author", gender="male", looking_for_gender="any",
        looking_for_age_min=20, looking_for_age_max=30
    )
    assert are_profiles_compatible(viewer, author, today=TODAY)


def test_viewer_without_birthdate_skips_viewer_age_check(make_profile):
    viewer = make_profile("viewer", gender="female")
    author = make_profile(
        "author", gender="male", looking_for_gender="female",
        looking_for_age_min=20, looking_for_age_max=21
    )
    assert are_profiles_compatible(viewer, author, today=TODAY)


def test_compatibility_uses_age_cache(make_profile):
    cache = AgeCache()
    viewer = make_profile("viewer", birthdate=birthdate_for_age(30))
    author = make_profile(
        "author", birthdate=birthdate_for_age(30), looking_for_gender="female",
        gender="male", looking_for_age_min=25, looking_for_age_max=35
    )
    for _ in range(3):
        assert are_profiles_compatible(viewer, author, today=TODAY, age_cache=cache)
    assert cache.misses == 1
    assert cache.hits == 5


def test_default_reference_date_is_utc(monkeypatch):
    # 00:30 UTC on the birthday, still the previous day west of Greenwich
    monkeypatch.setattr(
        "feedrank.compatibility.age.utc_now",
        lambda: datetime(2026, 10, 20, 0, 30, tzinfo=timezone.utc)
    )
    assert calculate_age("1990-10-20") == 36
    assert AgeCache().age("1990-10-20") == 36


def test_reference_date_converts_to_utc():
    paris_evening = datetime(2026, 10, 20, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert reference_date(paris_evening) == date(2026, 10, 19)
    assert reference_date(datetime(2026, 10, 20, 1, 0)) == date(2026, 10, 20)
