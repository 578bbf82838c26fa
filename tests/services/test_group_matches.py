# tests/services/test_group_matches.py
"""Tests for live match aggregation over group membership."""

from whattowatch.services.groups import join_group, leave_group
from whattowatch.services.matches import list_group_matches
from whattowatch.services.swipes import upsert_swipe


def rate(db, user_id, movie_id, score, media_type="movie"):
    upsert_swipe(
        db,
        user_id=user_id,
        group_id="group-1",
        movie_id=movie_id,
        media_type=media_type,
        score=score,
        status="swiped",
    )


def test_match_requires_every_member(db_session, family) -> None:
    rate(db_session, "alice", "603", 3)
    rate(db_session, "bob", "603", 2)
    assert list_group_matches(db_session, family.id) == []

    rate(db_session, "carol", "603", 1)
    (match,) = list_group_matches(db_session, family.id)
    assert (match.movie_id, match.score, match.swipe_count) == ("603", 6, 3)


def test_departed_member_veto_no_longer_counts(db_session, family) -> None:
    rate(db_session, "alice", "603", 3)
    rate(db_session, "bob", "603", 2)
    rate(db_session, "carol", "603", 0)
    assert list_group_matches(db_session, family.id) == []

    leave_group(db_session, "carol", family.id)

    (match,) = list_group_matches(db_session, family.id)
    assert match.score == 5
    assert match.swipe_count == 2


def test_new_member_reopens_the_vote(db_session, family, make_profile) -> None:
    rate(db_session, "alice", "603", 3)
    rate(db_session, "bob", "603", 3)
    rate(db_session, "carol", "603", 3)
    assert len(list_group_matches(db_session, family.id)) == 1

    make_profile("dave")
    join_group(db_session, "dave", family.invite_code)

    assert list_group_matches(db_session, family.id) == []


def test_matches_ranked_best_first(db_session, family) -> None:
    for user_id in ("alice", "bob", "carol"):
        rate(db_session, user_id, "10", 2)
        rate(db_session, user_id, "20", 3)
        rate(db_session, user_id, "30", 1)

    ranked = list_group_matches(db_session, family.id)

    assert [(m.movie_id, m.score) for m in ranked] == [("20", 9), ("10", 6)]


def test_unknown_group_has_no_matches(db_session) -> None:
    assert list_group_matches(db_session, "missing") == []
