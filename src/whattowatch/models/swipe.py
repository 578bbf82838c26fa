"""Models capturing per-user ratings of catalog titles."""

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from whattowatch.db.session import Base
from whattowatch.db.time import utcnow

MEDIA_TYPES = ("movie", "tv")

STATUS_SWIPED = "swiped"
STATUS_WATCHING = "watching"
STATUS_WATCHED = "watched"
SWIPE_STATUSES = (STATUS_SWIPED, STATUS_WATCHING, STATUS_WATCHED)


class Swipe(Base):
    """Per-user rating of one title within one group.

    Re-rating replaces the previous row for the same key; there is no history.
    """

    __tablename__ = "swipe"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "movie_id", "media_type", "group_id", name="uq_swipe_user_title_group"
        ),
        CheckConstraint("score >= 0 AND score <= 3", name="ck_swipe_score"),
        CheckConstraint("media_type IN ('movie', 'tv')", name="ck_swipe_media_type"),
        CheckConstraint(
            "status IN ('swiped', 'watching', 'watched')", name="ck_swipe_status"
        ),
        Index("ix_swipe_group_title", "group_id", "movie_id", "media_type"),
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
    # Catalog provider identifier, kept as text.
    movie_id: Mapped[str] = mapped_column(String(32), nullable=False)
    media_type: Mapped[str] = mapped_column(String(8), nullable=False, default="movie")
    # 0 = nope, 1 = maybe, 2 = want, 3 = must watch.
    score: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_SWIPED)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
