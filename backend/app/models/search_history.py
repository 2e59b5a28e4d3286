"""Search history model — recent ingredient sets per user."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, UUIDPrimaryKeyMixin


class SearchHistory(UUIDPrimaryKeyMixin, Base):
    """One ingredient set a user searched with."""

    __tablename__ = "search_history"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ingredients: Mapped[list] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<SearchHistory(user_id={self.user_id}, ingredients={self.ingredients!r})>"
