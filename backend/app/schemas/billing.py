"""Pydantic v2 request/response schemas for subscription endpoints."""

from datetime import datetime
from typing import Literal

from app.schemas.base import CamelModel

# --- Request schemas ---


class CreateSubscriptionRequest(CamelModel):
    """Start a Chef Pro checkout."""

    email: str | None = None
    plan_type: Literal["monthly", "yearly"] = "monthly"
    frontend_url: str | None = None


# --- Response schemas ---


class PlanResponse(CamelModel):
    """Plan details for display."""

    plan_type: str
    plan_name: str
    amount: int
    currency: str
    frequency: int
    frequency_type: str


class PlansListResponse(CamelModel):
    plans: list[PlanResponse]
    free_favorites_limit: int


class CreateSubscriptionResponse(CamelModel):
    """Checkout link for the pending preapproval."""

    success: bool
    init_point: str
    subscription_id: str


class CancelSubscriptionResponse(CamelModel):
    success: bool


class PremiumStatusResponse(CamelModel):
    """Entitlement record plus the ledger status it was derived from."""

    is_premium: bool
    status: str | None = None
    plan_type: str | None = None
    premium_since: datetime | None = None
    premium_ended_at: datetime | None = None
