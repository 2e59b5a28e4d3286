"""Image generation usage tracking model."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, UUIDPrimaryKeyMixin


class ImageUsage(UUIDPrimaryKeyMixin, Base):
    """One successful dish-image generation, counted against the daily quota."""

    __tablename__ = "image_usage"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    model: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<ImageUsage(id={self.id}, user_id={self.user_id}, model={self.model!r})>"
