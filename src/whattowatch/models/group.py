"""SQLAlchemy models for watch groups and their membership."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from whattowatch.db.session import Base
from whattowatch.db.time import utcnow

ROLE_OWNER = "owner"
ROLE_MEMBER = "member"


def _new_id() -> str:
    return str(uuid.uuid4())


class WatchGroup(Base):
    """A family or friend group that swipes together."""

    __tablename__ = "watch_group"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # Short shareable code; always stored upper-case.
    invite_code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    created_by: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("profile.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class GroupMember(Base):
    """Join table mapping users into groups.

    Membership is read live whenever a group-scoped view is computed.
    """

    __tablename__ = "group_member"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_group_member_user_group"),
        CheckConstraint("role IN ('owner', 'member')", name="ck_group_member_role"),
        Index("ix_group_member_group_id", "group_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profile.id", ondelete="CASCADE"),
        nullable=False,
    )
    group_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("watch_group.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_MEMBER)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
