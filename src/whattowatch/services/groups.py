"""Group and membership directory helpers."""
from __future__ import annotations

import logging
import secrets
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from whattowatch.models import GroupMember, Profile, WatchGroup
from whattowatch.models.group import ROLE_MEMBER, ROLE_OWNER

__all__ = [
    "AlreadyMemberError",
    "GroupNotFoundError",
    "MembershipNotFoundError",
    "ProfileNotFoundError",
    "UnknownReferenceError",
    "create_group",
    "current_member_ids",
    "generate_invite_code",
    "join_group",
    "leave_group",
    "list_members",
    "list_memberships",
    "upsert_profile",
]

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 6
_INVITE_CODE_ATTEMPTS = 5


class ProfileNotFoundError(LookupError):
    """Raised when an operation references an unknown user."""


class GroupNotFoundError(LookupError):
    """Raised when an invite code or group id does not resolve."""


class MembershipNotFoundError(LookupError):
    """Raised when a user is not a member of the given group."""


class AlreadyMemberError(ValueError):
    """Raised when a user tries to join a group twice."""


class UnknownReferenceError(LookupError):
    """Raised when a write names a user or group that does not exist."""


def generate_invite_code() -> str:
    """Return a random invite code without visually ambiguous characters."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def _require_profile(db: Session, user_id: str) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(f"Unknown user {user_id}")
    return profile


def upsert_profile(db: Session, user_id: str, display_name: str | None) -> Profile:
    """Create or update the profile row for ``user_id``."""
    profile = db.get(Profile, user_id)
    if profile is None:
        profile = Profile(id=user_id, display_name=display_name)
        db.add(profile)
    else:
        profile.display_name = display_name
    db.commit()
    db.refresh(profile)
    return profile


def current_member_ids(db: Session, group_id: str) -> list[str]:
    """Return ids of the users who belong to the group right now."""
    rows = (
        db.query(GroupMember.user_id)
        .filter(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at, GroupMember.user_id)
        .all()
    )
    return [row.user_id for row in rows]


def create_group(db: Session, user_id: str, name: str) -> WatchGroup:
    """Create a group owned by ``user_id`` and enrol them as its first member."""
    _require_profile(db, user_id)

    for _ in range(_INVITE_CODE_ATTEMPTS):
        code = generate_invite_code()
        taken = db.query(WatchGroup.id).filter(WatchGroup.invite_code == code).first()
        if taken is None:
            break
    else:  # pragma: no cover
        raise RuntimeError("Could not allocate a unique invite code")

    group = WatchGroup(name=name.strip(), invite_code=code, created_by=user_id)
    db.add(group)
    db.flush()
    db.add(GroupMember(user_id=user_id, group_id=group.id, role=ROLE_OWNER))
    db.commit()
    db.refresh(group)
    logger.info("Created group %s for user %s", group.id, user_id)
    return group


def join_group(db: Session, user_id: str, invite_code: str) -> WatchGroup:
    """Add ``user_id`` to the group identified by ``invite_code``.

    Raises:
        GroupNotFoundError: If no group uses the code.
        AlreadyMemberError: If the user already belongs to the group.
    """
    _require_profile(db, user_id)
    code = invite_code.strip().upper()
    group = db.query(WatchGroup).filter(WatchGroup.invite_code == code).first()
    if group is None:
        raise GroupNotFoundError("Invalid invite code. Check the code and try again.")

    existing = db.query(GroupMember).filter(
        GroupMember.group_id == group.id,
        GroupMember.user_id == user_id,
    ).first()
    if existing is not None:
        raise AlreadyMemberError("Already a member of this group")

    db.add(GroupMember(user_id=user_id, group_id=group.id, role=ROLE_MEMBER))
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise AlreadyMemberError("Already a member of this group") from exc
    return group


def leave_group(db: Session, user_id: str, group_id: str) -> None:
    """Remove a membership. Swipes the user made in the group are kept."""
    membership = db.query(GroupMember).filter(
        GroupMember.group_id == group_id,
        GroupMember.user_id == user_id,
    ).first()
    if membership is None:
        raise MembershipNotFoundError("Not a member of this group")
    db.delete(membership)
    db.commit()


def list_memberships(db: Session, user_id: str) -> Sequence[tuple[WatchGroup, GroupMember]]:
    """Return the groups ``user_id`` belongs to, oldest membership first."""
    return (
        db.query(WatchGroup, GroupMember)
        .join(GroupMember, GroupMember.group_id == WatchGroup.id)
        .filter(GroupMember.user_id == user_id)
        .order_by(GroupMember.joined_at)
        .all()
    )


def list_members(db: Session, group_id: str) -> Sequence[tuple[GroupMember, Profile]]:
    """Return current members of a group with their profiles."""
    if db.get(WatchGroup, group_id) is None:
        raise GroupNotFoundError("Group not found")
    return (
        db.query(GroupMember, Profile)
        .join(Profile, Profile.id == GroupMember.user_id)
        .filter(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at, GroupMember.user_id)
        .all()
    )
