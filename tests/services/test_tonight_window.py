# tests/services/test_tonight_window.py
"""Tests for the rolling tonight-picks window."""

from datetime import timedelta

import pytest

from whattowatch.models import TonightPick
from whattowatch.services.groups import UnknownReferenceError
from whattowatch.services.tonight import active_picks, add_pick, group_picks, remove_pick


def pick(db, user_id, movie_id, at, media_type="movie", group_id="group-1"):
    return add_pick(
        db,
        user_id=user_id,
        group_id=group_id,
        movie_id=movie_id,
        media_type=media_type,
        now=at,
    )


def test_pick_expires_after_window(db_session, family, now) -> None:
    pick(db_session, "alice", "603", now)

    assert len(active_picks(db_session, family.id, now=now + timedelta(hours=11))) == 1
    assert active_picks(db_session, family.id, now=now + timedelta(hours=13)) == []


def test_repicking_overwrites_instead_of_duplicating(db_session, family, now) -> None:
    pick(db_session, "alice", "603", now)
    pick(db_session, "alice", "603", now + timedelta(hours=2))

    rows = db_session.query(TonightPick).all()
    assert len(rows) == 1
    # Refreshed timestamp keeps it active past the first pick's expiry.
    assert len(active_picks(db_session, family.id, now=now + timedelta(hours=13))) == 1


def test_new_pick_purges_only_own_expired_picks(db_session, family, now) -> None:
    pick(db_session, "alice", "1", now)
    pick(db_session, "bob", "2", now)

    pick(db_session, "alice", "3", now + timedelta(hours=13))

    remaining = {(row.user_id, row.movie_id) for row in db_session.query(TonightPick).all()}
    assert remaining == {("bob", "2"), ("alice", "3")}


def test_overlap_needs_two_distinct_users(db_session, family, now) -> None:
    pick(db_session, "alice", "603", now)
    pick(db_session, "bob", "603", now + timedelta(minutes=5))
    pick(db_session, "carol", "603", now, media_type="tv")
    pick(db_session, "carol", "78", now)

    grouped = group_picks(active_picks(db_session, family.id, now=now + timedelta(hours=1)))
    by_key = {(entry.movie_id, entry.media_type): entry for entry in grouped}

    assert by_key[("603", "movie")].is_overlap
    assert by_key[("603", "movie")].user_ids == ["alice", "bob"]
    assert not by_key[("603", "tv")].is_overlap
    assert not by_key[("78", "movie")].is_overlap


def test_remove_pick(db_session, family, now) -> None:
    pick(db_session, "alice", "603", now)

    assert remove_pick(db_session, user_id="alice", movie_id="603", media_type="movie") == 1
    assert remove_pick(db_session, user_id="alice", movie_id="603", media_type="movie") == 0
    assert active_picks(db_session, family.id, now=now) == []


def test_picks_are_scoped_to_group(db_session, family, make_group, now) -> None:
    other = make_group("carol", group_id="group-2", invite_code="XYZ789")
    pick(db_session, "carol", "9", now, group_id=other.id)

    assert active_picks(db_session, family.id, now=now) == []
    assert len(active_picks(db_session, other.id, now=now)) == 1


def test_pick_wins_over_row_inserted_after_lookup(
    db_session, family, now, competing_insert
) -> None:
    fired = competing_insert(
        TonightPick.__table__,
        id="other-request",
        user_id="alice",
        group_id="group-1",
        movie_id="603",
        media_type="movie",
        created_at=now,
    )

    result = pick(db_session, "alice", "603", now + timedelta(hours=2))

    assert fired
    (row,) = db_session.query(TonightPick).all()
    assert row.id == result.id == "other-request"
    assert len(active_picks(db_session, family.id, now=now + timedelta(hours=13))) == 1


def test_pick_for_unknown_user_is_rejected(db_session, family, now) -> None:
    with pytest.raises(UnknownReferenceError):
        pick(db_session, "ghost", "603", now)

    assert db_session.query(TonightPick).count() == 0
