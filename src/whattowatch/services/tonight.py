"""Rolling "watch tonight" window and overlap detection.

Picks expire by age alone: the active set is whatever was picked within the
window before "now", computed at read time. Nothing is scheduled; the only
physical cleanup happens when a user adds a new pick.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from whattowatch.core.settings import settings
from whattowatch.db.time import utcnow, window_cutoff
from whattowatch.db.upsert import upsert
from whattowatch.models import TonightPick
from whattowatch.services.groups import UnknownReferenceError

logger = logging.getLogger(__name__)

_PICK_KEY = ("user_id", "movie_id", "media_type")


@dataclass
class PickGroup:
    """All active picks for one title, in pick order."""

    movie_id: str
    media_type: str
    user_ids: list[str] = field(default_factory=list)

    @property
    def is_overlap(self) -> bool:
        return len(set(self.user_ids)) >= 2


def group_picks(picks: Iterable[TonightPick]) -> list[PickGroup]:
    """Bucket picks by title, preserving first-seen order."""
    groups: dict[tuple[str, str], PickGroup] = {}
    for pick in picks:
        key = (pick.movie_id, pick.media_type)
        entry = groups.get(key)
        if entry is None:
            entry = groups[key] = PickGroup(movie_id=pick.movie_id, media_type=pick.media_type)
        if pick.user_id not in entry.user_ids:
            entry.user_ids.append(pick.user_id)
    return list(groups.values())


def active_picks(db: Session, group_id: str, now: datetime | None = None) -> list[TonightPick]:
    """Return the group's picks made within the window ending at ``now``."""
    cutoff = window_cutoff(settings.tonight_window_hours, now)
    return (
        db.query(TonightPick)
        .filter(
            TonightPick.group_id == group_id,
            TonightPick.created_at >= cutoff,
        )
        .order_by(TonightPick.created_at, TonightPick.id)
        .all()
    )


def purge_expired(db: Session, user_id: str, now: datetime | None = None) -> int:
    """Delete the user's picks that have aged out of the window."""
    cutoff = window_cutoff(settings.tonight_window_hours, now)
    return (
        db.query(TonightPick)
        .filter(TonightPick.user_id == user_id, TonightPick.created_at < cutoff)
        .delete(synchronize_session=False)
    )


def add_pick(
    db: Session,
    *,
    user_id: str,
    group_id: str,
    movie_id: str,
    media_type: str,
    now: datetime | None = None,
) -> TonightPick:
    """Pick a title for tonight, replacing the user's earlier pick of it."""
    timestamp = now or utcnow()
    purged = purge_expired(db, user_id, timestamp)
    if purged:
        logger.debug("Purged %d expired tonight picks for user %s", purged, user_id)

    try:
        pick = upsert(
            db,
            TonightPick,
            {
                "user_id": user_id,
                "group_id": group_id,
                "movie_id": movie_id,
                "media_type": media_type,
                "created_at": timestamp,
            },
            conflict_columns=_PICK_KEY,
            update_columns=("group_id", "created_at"),
        )
    except IntegrityError as exc:
        db.rollback()
        raise UnknownReferenceError(f"Unknown user {user_id} or group {group_id}") from exc

    db.commit()
    db.refresh(pick)
    return pick


def remove_pick(
    db: Session,
    *,
    user_id: str,
    movie_id: str,
    media_type: str,
    commit: bool = True,
) -> int:
    """Un-pick a title; returns the number of rows removed."""
    removed = (
        db.query(TonightPick)
        .filter(
            TonightPick.user_id == user_id,
            TonightPick.movie_id == movie_id,
            TonightPick.media_type == media_type,
        )
        .delete(synchronize_session=False)
    )
    if commit:
        db.commit()
    return removed
