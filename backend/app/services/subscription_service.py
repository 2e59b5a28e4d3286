"""Subscription service — ledger upserts and entitlement transitions."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.billing.plans import Plan
from app.billing.state_machine import EntitlementAction, resolve_action
from app.database import utcnow
from app.models.subscription import Subscription
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookOutcome:
    """Result of applying one webhook delivery."""

    resolved: bool
    action: EntitlementAction
    subscription: Subscription | None = None


async def get_subscription_for_user(db: AsyncSession, user_id: uuid.UUID) -> Subscription | None:
    """Return the user's ledger entry, if any."""
    result = await db.execute(select(Subscription).where(Subscription.user_id == user_id))
    return result.scalar_one_or_none()


async def get_subscription_by_gateway_id(
    db: AsyncSession, gateway_subscription_id: str
) -> Subscription | None:
    """Look up a ledger entry by Mercado Pago preapproval ID (used by webhooks)."""
    result = await db.execute(
        select(Subscription).where(Subscription.gateway_subscription_id == gateway_subscription_id)
    )
    return result.scalar_one_or_none()


async def upsert_pending_subscription(
    db: AsyncSession,
    user: User,
    plan: Plan,
    email: str,
    gateway_subscription_id: str,
) -> Subscription:
    """Write the user's single ledger entry in ``pending`` state for a new checkout."""
    now = utcnow()
    subscription = await get_subscription_for_user(db, user.id)
    if subscription is None:
        subscription = Subscription(user_id=user.id, created_at=now)
        db.add(subscription)

    subscription.gateway_subscription_id = gateway_subscription_id
    subscription.status = "pending"
    subscription.plan_type = plan.plan_type
    subscription.plan_name = plan.plan_name
    subscription.amount = plan.amount
    subscription.currency = plan.currency
    subscription.email = email
    subscription.updated_at = now
    await db.flush()

    logger.info(
        "Ledger entry for user %s is pending on preapproval %s (%s)",
        user.id,
        gateway_subscription_id,
        plan.plan_type,
    )
    return subscription


async def grant_premium(db: AsyncSession, user: User, now: datetime | None = None) -> User:
    """Mark the user premium. Re-granting an active user changes nothing."""
    now = now or utcnow()
    if not user.is_premium:
        # New premium interval
        user.premium_since = now
        user.premium_ended_at = None
    elif user.premium_since is None:
        user.premium_since = now
    user.is_premium = True
    await db.flush()
    return user


async def revoke_premium(db: AsyncSession, user: User, now: datetime | None = None) -> User:
    """Mark the user free and stamp the end of the premium interval."""
    now = now or utcnow()
    if user.is_premium or user.premium_ended_at is None:
        user.premium_ended_at = now
    user.is_premium = False
    await db.flush()
    return user


async def apply_entitlement_action(
    db: AsyncSession, user: User, action: EntitlementAction, now: datetime | None = None
) -> None:
    """Apply GRANT/REVOKE to the entitlement record; IGNORE leaves it untouched."""
    if action is EntitlementAction.GRANT:
        await grant_premium(db, user, now)
    elif action is EntitlementAction.REVOKE:
        await revoke_premium(db, user, now)


async def apply_webhook_status(
    db: AsyncSession,
    gateway_subscription_id: str | None,
    reported_status: str | None,
    payer_email: str | None = None,
    external_reference: str | None = None,
) -> WebhookOutcome:
    """Apply one webhook delivery to the ledger and the entitlement record.

    The ledger entry is resolved by the preapproval id, the join key that
    stays fixed for the life of a checkout. ``external_reference`` (the user
    id handed to the gateway at creation) only confirms the match. Deliveries
    for a preapproval the ledger no longer points at, such as an abandoned
    earlier checkout, are logged and dropped. Last write wins: there is no
    ordering check against earlier deliveries.
    """
    subscription = None
    if gateway_subscription_id:
        subscription = await get_subscription_by_gateway_id(db, gateway_subscription_id)

    if subscription is not None and external_reference:
        try:
            reference_user_id = uuid.UUID(external_reference)
        except ValueError:
            logger.warning("Webhook external_reference %r is not a user id", external_reference)
        else:
            if reference_user_id != subscription.user_id:
                logger.warning(
                    "Preapproval %s belongs to user %s but references user %s, dropping",
                    gateway_subscription_id,
                    subscription.user_id,
                    reference_user_id,
                )
                subscription = None

    if subscription is None:
        logger.warning(
            "Unresolvable webhook delivery (preapproval=%s, reference=%s), acknowledging",
            gateway_subscription_id,
            external_reference,
        )
        return WebhookOutcome(resolved=False, action=EntitlementAction.IGNORE)

    now = utcnow()
    if reported_status:
        subscription.status = reported_status
    if payer_email and not subscription.email:
        subscription.email = payer_email
    subscription.updated_at = now
    subscription.last_webhook_at = now
    await db.flush()

    action = resolve_action(reported_status)
    user = await db.get(User, subscription.user_id)
    if action is EntitlementAction.IGNORE:
        logger.info(
            "Status %r for preapproval %s is not actionable, entitlement unchanged",
            reported_status,
            gateway_subscription_id,
        )
    elif user is not None:
        await apply_entitlement_action(db, user, action, now)

    logger.info(
        "Webhook applied: preapproval %s → status=%s, action=%s",
        subscription.gateway_subscription_id,
        subscription.status,
        action.value,
    )
    return WebhookOutcome(resolved=True, action=action, subscription=subscription)


async def mark_cancelled(db: AsyncSession, user: User, subscription: Subscription) -> Subscription:
    """User-initiated cancellation: ledger → cancelled, entitlement revoked."""
    now = utcnow()
    subscription.status = "cancelled"
    subscription.updated_at = now
    await db.flush()
    await revoke_premium(db, user, now)

    logger.info(
        "Subscription %s (user %s) cancelled by user",
        subscription.gateway_subscription_id,
        user.id,
    )
    return subscription
