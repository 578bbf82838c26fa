"""Streaming subscription bookkeeping and availability resolution."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from whattowatch.models import Profile, UserProvider
from whattowatch.services.groups import ProfileNotFoundError, current_member_ids

logger = logging.getLogger(__name__)


def user_provider_ids(db: Session, user_id: str) -> list[int]:
    rows = (
        db.query(UserProvider.provider_id)
        .filter(UserProvider.user_id == user_id)
        .order_by(UserProvider.provider_id)
        .all()
    )
    return [row.provider_id for row in rows]


def set_user_providers(db: Session, user_id: str, provider_ids: Iterable[int]) -> list[int]:
    """Replace the user's subscriptions with ``provider_ids``."""
    if db.get(Profile, user_id) is None:
        raise ProfileNotFoundError(f"Unknown user {user_id}")

    wanted = sorted(set(int(pid) for pid in provider_ids))
    db.query(UserProvider).filter(UserProvider.user_id == user_id).delete(
        synchronize_session=False
    )
    for provider_id in wanted:
        db.add(UserProvider(user_id=user_id, provider_id=provider_id))
    db.commit()
    return wanted


def group_provider_ids(db: Session, group_id: str) -> list[int]:
    """Return every service at least one current member subscribes to.

    The group can watch together on any one member's account, so this is a
    union rather than an intersection.
    """
    members = current_member_ids(db, group_id)
    if not members:
        return []
    rows = (
        db.query(UserProvider.provider_id)
        .filter(UserProvider.user_id.in_(members))
        .distinct()
        .order_by(UserProvider.provider_id)
        .all()
    )
    return [row.provider_id for row in rows]


def resolve_available_providers(db: Session, group_id: str | None) -> tuple[int, ...]:
    """Best-effort provider filter for discovery.

    Any failure is logged and treated as "no provider filter" so the feed
    stays available.
    """
    if not group_id:
        return ()
    try:
        return tuple(group_provider_ids(db, group_id))
    except SQLAlchemyError as exc:
        logger.warning("Provider resolution failed for group %s: %s", group_id, exc)
        db.rollback()
        return ()
