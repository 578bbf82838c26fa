# tests/test_discovery_builder.py
"""Tests for discovery filter parsing and query construction."""

from datetime import date

import pytest
from pydantic import ValidationError

from whattowatch.schemas.discovery import DEFAULT_SORT, DiscoveryFilters
from whattowatch.services.discovery import (
    RuntimeRange,
    build_discover_params,
    has_active_filters,
    interleave,
    months_before,
    resolve_genre_ids,
    runtime_range,
    union_certifications,
)

TODAY = date(2026, 10, 16)


def filters(**values) -> DiscoveryFilters:
    return DiscoveryFilters.model_validate(values)


@pytest.mark.parametrize(
    ("labels", "expected"),
    [
        ([], None),
        (["<90"], RuntimeRange(None, 90)),
        (["90-120"], RuntimeRange(90, 120)),
        (["2+ hours"], RuntimeRange(120, None)),
        (["<90", "90-120"], RuntimeRange(None, 120)),
        (["90-120", "2+ hours"], RuntimeRange(90, None)),
        (["<90", "2+ hours"], None),
        (["<90", "90-120", "2+ hours"], None),
        (["2+ hours", "<90", "90-120"], None),
        (["unknown"], None),
    ],
)
def test_runtime_bucket_union(labels, expected) -> None:
    assert runtime_range(labels) == expected


def test_age_ratings_are_unioned() -> None:
    certs = union_certifications(["Family (G/PG)", "Mature (R)"], "movie")
    assert certs == "G|PG|PG-13|R"


def test_age_rating_all_ages_removes_restriction() -> None:
    assert union_certifications(["All Ages", "Family (G/PG)"], "movie") is None
    assert union_certifications([], "tv") is None


def test_tv_certifications_differ_from_movie() -> None:
    assert union_certifications(["Family (G/PG)"], "tv") == "TV-Y|TV-Y7|TV-G|TV-PG"


def test_genre_ids_depend_on_media_type() -> None:
    assert resolve_genre_ids(["Action", "Comedy"], "movie") == "28,35"
    assert resolve_genre_ids(["Action", "Comedy"], "tv") == "10759,35"
    assert resolve_genre_ids(["Horror"], "tv") == ""


def test_interleave_appends_longer_tail() -> None:
    assert interleave(["m0", "m1", "m2"], ["t0", "t1"]) == ["m0", "t0", "m1", "t1", "m2"]
    assert interleave([], ["t0"]) == ["t0"]


def test_months_before_clamps_day() -> None:
    assert months_before(date(2026, 8, 31), 6) == date(2026, 2, 28)
    assert months_before(date(2026, 3, 15), 6) == date(2025, 9, 15)


def test_filters_parse_query_string_shapes() -> None:
    parsed = filters(
        genres="Action, Drama",
        ageRating="Teen (PG-13)",
        runtimes="<90,90-120",
        watchProviders="8|337",
        minRating="",
        newReleases="true",
        sortBy="",
    )

    assert parsed.genres == ("Action", "Drama")
    assert parsed.age_rating == ("Teen (PG-13)",)
    assert parsed.runtimes == ("<90", "90-120")
    assert parsed.watch_providers == (8, 337)
    assert parsed.min_rating is None
    assert parsed.new_releases is True
    assert parsed.sort_by == DEFAULT_SORT


def test_filters_reject_out_of_range_rating() -> None:
    with pytest.raises(ValidationError):
        filters(minRating="11")


def test_no_filters_is_inactive() -> None:
    assert not has_active_filters(filters())
    assert has_active_filters(filters(language="ko"))
    assert has_active_filters(filters(sortBy="vote_average.desc"))


def test_default_params() -> None:
    params = build_discover_params(filters(page=3), "movie", TODAY)

    assert params == {
        "page": "3",
        "sort_by": "popularity.desc",
        "include_adult": "false",
        "vote_count.gte": "50",
    }


def test_full_movie_params() -> None:
    params = build_discover_params(
        filters(
            genres="Drama",
            ageRating="Family (G/PG)",
            minRating="6.5",
            runtimes="90-120",
            language="fr",
            newReleases="true",
            watchProviders="8|9",
            isFree="true",
        ),
        "movie",
        TODAY,
    )

    assert params["with_genres"] == "18"
    assert params["certification_country"] == "US"
    assert params["certification"] == "G|PG"
    assert params["vote_average.gte"] == "6.5"
    assert params["with_runtime.gte"] == "90"
    assert params["with_runtime.lte"] == "120"
    assert params["with_original_language"] == "fr"
    assert params["primary_release_date.gte"] == "2026-04-16"
    assert params["with_watch_providers"] == "8|9"
    assert params["with_watch_monetization_types"] == "flatrate|free|ads"
    assert params["watch_region"] == "US"


def test_tv_params_skip_runtime_and_use_air_date() -> None:
    params = build_discover_params(
        filters(runtimes="<90", newReleases="true", sortBy="primary_release_date.desc"),
        "tv",
        TODAY,
    )

    assert "with_runtime.lte" not in params
    assert params["first_air_date.gte"] == "2026-04-16"
    assert params["sort_by"] == "first_air_date.desc"


def test_classic_overrides_new_releases() -> None:
    params = build_discover_params(
        filters(isClassic="true", newReleases="true", minRating="5"),
        "movie",
        TODAY,
    )

    assert params["primary_release_date.lte"] == "1999-12-31"
    assert "primary_release_date.gte" not in params
    assert params["vote_average.gte"] == "7"


def test_classic_keeps_stricter_user_floor() -> None:
    params = build_discover_params(filters(isClassic="true", minRating="8.5"), "movie", TODAY)
    assert params["vote_average.gte"] == "8.5"
