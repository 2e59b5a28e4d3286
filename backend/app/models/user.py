"""User model — Google sign-in identity and cached premium entitlement."""

from datetime import datetime

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """User account.

    ``is_premium``, ``premium_since`` and ``premium_ended_at`` form the
    entitlement record: a read-optimized cache of the subscription ledger,
    written only by the subscription service.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    auth_provider: Mapped[str] = mapped_column(String(50), nullable=False, default="google")
    auth_provider_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Entitlement
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    premium_since: Mapped[datetime | None] = mapped_column(nullable=True)
    premium_ended_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    subscription: Mapped["Subscription | None"] = relationship(
        "Subscription", back_populates="user", uselist=False, lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} premium={self.is_premium}>"
