"""Subscription status vocabulary and its mapping to entitlement actions.

Mercado Pago reports a preapproval status as a plain string. Every status is
resolved here, in one place, to what it means for premium access::

    pending ──► authorized / active ──► paused / cancelled
                      ▲                    │
                      └──── (paused) ──────┘

``cancelled`` is terminal. Unknown strings resolve to IGNORE so new gateway
statuses never flip entitlement by accident.
"""

from enum import Enum


class SubscriptionStatus(str, Enum):
    """Preapproval statuses known to this service."""

    PENDING = "pending"
    AUTHORIZED = "authorized"
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class EntitlementAction(str, Enum):
    """What a reported status does to the entitlement record."""

    GRANT = "grant"
    REVOKE = "revoke"
    IGNORE = "ignore"


_STATUS_ACTIONS: dict[SubscriptionStatus, EntitlementAction] = {
    SubscriptionStatus.PENDING: EntitlementAction.IGNORE,
    SubscriptionStatus.AUTHORIZED: EntitlementAction.GRANT,
    SubscriptionStatus.ACTIVE: EntitlementAction.GRANT,
    SubscriptionStatus.PAUSED: EntitlementAction.REVOKE,
    SubscriptionStatus.CANCELLED: EntitlementAction.REVOKE,
}


def parse_status(reported_status: str | None) -> SubscriptionStatus | None:
    """Return the known status for a gateway string, or None if unrecognized."""
    if not reported_status:
        return None
    try:
        return SubscriptionStatus(reported_status.strip().lower())
    except ValueError:
        return None


def resolve_action(reported_status: str | None) -> EntitlementAction:
    """Map any gateway status string to GRANT, REVOKE or IGNORE."""
    status = parse_status(reported_status)
    if status is None:
        return EntitlementAction.IGNORE
    return _STATUS_ACTIONS[status]


def is_premium_status(reported_status: str | None) -> bool:
    """True iff the status resolves to premium access (authorized or active)."""
    return resolve_action(reported_status) is EntitlementAction.GRANT
