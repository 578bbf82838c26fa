"""Swipe store: per-user ratings keyed by user, title and group."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from whattowatch.db.time import utcnow
from whattowatch.db.upsert import upsert
from whattowatch.models import Swipe
from whattowatch.models.swipe import STATUS_WATCHED
from whattowatch.services.groups import UnknownReferenceError, current_member_ids
from whattowatch.services.tonight import remove_pick

logger = logging.getLogger(__name__)

_SWIPE_KEY = ("user_id", "movie_id", "media_type", "group_id")


@dataclass(frozen=True)
class WatchlistEntry:
    """A title the user wants to watch, with how many others want it too."""

    movie_id: str
    media_type: str
    my_score: int
    status: str
    others_count: int


def upsert_swipe(
    db: Session,
    *,
    user_id: str,
    group_id: str,
    movie_id: str,
    media_type: str,
    score: int,
    status: str,
    now: datetime | None = None,
) -> Swipe:
    """Record a rating, replacing any earlier one for the same key.

    Replaying the same request leaves the same end state. Marking a title
    as watched also resolves the user's tonight pick for it.
    """
    try:
        swipe = upsert(
            db,
            Swipe,
            {
                "user_id": user_id,
                "group_id": group_id,
                "movie_id": movie_id,
                "media_type": media_type,
                "score": score,
                "status": status,
                "created_at": now or utcnow(),
            },
            conflict_columns=_SWIPE_KEY,
            update_columns=("score", "status", "created_at"),
        )
    except IntegrityError as exc:
        db.rollback()
        raise UnknownReferenceError(f"Unknown user {user_id} or group {group_id}") from exc

    if status == STATUS_WATCHED:
        remove_pick(db, user_id=user_id, movie_id=movie_id, media_type=media_type, commit=False)

    db.commit()
    db.refresh(swipe)
    return swipe


def delete_swipe(db: Session, *, user_id: str, movie_id: str, media_type: str) -> int:
    """Remove the user's swipes on a title in every group; returns rows removed."""
    removed = (
        db.query(Swipe)
        .filter(
            Swipe.user_id == user_id,
            Swipe.movie_id == movie_id,
            Swipe.media_type == media_type,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return removed


def swiped_keys(db: Session, user_id: str, group_id: str | None = None) -> list[str]:
    """Return ``"<movie_id>_<media_type>"`` once for every title the user rated."""
    query = db.query(Swipe.movie_id, Swipe.media_type).filter(Swipe.user_id == user_id)
    if group_id:
        query = query.filter(Swipe.group_id == group_id)
    query = query.group_by(Swipe.movie_id, Swipe.media_type).order_by(
        func.min(Swipe.created_at), Swipe.movie_id, Swipe.media_type
    )
    return [f"{row.movie_id}_{row.media_type}" for row in query]


def watchlist(db: Session, user_id: str, group_id: str) -> list[WatchlistEntry]:
    """Return the user's positively rated titles in a group, newest first."""
    mine = (
        db.query(Swipe)
        .filter(
            Swipe.user_id == user_id,
            Swipe.group_id == group_id,
            Swipe.score > 0,
        )
        .order_by(Swipe.created_at.desc(), Swipe.movie_id)
        .all()
    )
    if not mine:
        return []

    others = [member for member in current_member_ids(db, group_id) if member != user_id]
    counts: dict[tuple[str, str], int] = {}
    if others:
        rows = (
            db.query(Swipe.movie_id, Swipe.media_type, func.count(Swipe.user_id))
            .filter(
                Swipe.group_id == group_id,
                Swipe.user_id.in_(others),
                Swipe.movie_id.in_([swipe.movie_id for swipe in mine]),
                Swipe.score > 0,
            )
            .group_by(Swipe.movie_id, Swipe.media_type)
            .all()
        )
        counts = {(movie_id, media_type): count for movie_id, media_type, count in rows}

    return [
        WatchlistEntry(
            movie_id=swipe.movie_id,
            media_type=swipe.media_type,
            my_score=swipe.score,
            status=swipe.status,
            others_count=counts.get((swipe.movie_id, swipe.media_type), 0),
        )
        for swipe in mine
    ]
