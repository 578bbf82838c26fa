"""SQLAlchemy model for streaming subscriptions."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from whattowatch.db.session import Base


class UserProvider(Base):
    """Join table mapping users to the streaming services they subscribe to."""

    __tablename__ = "user_provider"

    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profile.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Catalog provider's numeric watch-provider id.
    provider_id: Mapped[int] = mapped_column(Integer, primary_key=True)
