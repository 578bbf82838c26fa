"""SQLAlchemy model for "watch tonight" selections."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from whattowatch.db.session import Base
from whattowatch.db.time import utcnow


class TonightPick(Base):
    """A user's intent to watch a title tonight.

    There is no stored expiry; picks fall out of the active set as ``created_at`` ages.
    """

    __tablename__ = "tonight_pick"
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", "media_type", name="uq_tonight_pick_user_title"),
        CheckConstraint("media_type IN ('movie', 'tv')", name="ck_tonight_pick_media_type"),
        Index("ix_tonight_pick_group_created", "group_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4())
    )
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
    movie_id: Mapped[str] = mapped_column(String(32), nullable=False)
    media_type: Mapped[str] = mapped_column(String(8), nullable=False, default="movie")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
