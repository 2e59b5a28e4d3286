"""Subscription ledger model — one Mercado Pago preapproval per user."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Subscription(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Tracks a user's subscription attempt and its gateway-reported status.

    Rows are upserted, never deleted: a cancelled entry stays as history.
    """

    __tablename__ = "subscriptions"

    # One ledger entry per user (UNIQUE enforces one-to-one)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )

    # Gateway identifier (preapproval id), echoed back on every webhook
    gateway_subscription_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True, index=True
    )

    # pending, authorized, active, paused, cancelled (gateway vocabulary)
    status: Mapped[str] = mapped_column(String(50), nullable=False, server_default="pending")

    # Informational plan data, set at creation
    plan_type: Mapped[str] = mapped_column(String(20), nullable=False)
    plan_name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    last_webhook_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    user: Mapped["User"] = relationship(back_populates="subscription", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, user_id={self.user_id}, "
            f"gateway_id={self.gateway_subscription_id}, status={self.status})>"
        )
