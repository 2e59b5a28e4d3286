"""Mercado Pago webhook handlers — reconcile preapproval status with the ledger."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.billing.mercadopago_client import get_preapproval
from app.services.subscription_service import WebhookOutcome, apply_webhook_status

logger = logging.getLogger(__name__)

PREAPPROVAL_EVENT = "subscription_preapproval"


def extract_notification(
    body: dict[str, Any] | None, query: dict[str, str] | None = None
) -> tuple[str | None, str | None]:
    """Return ``(type, data.id)`` from a notification.

    Mercado Pago sends ``{"type": ..., "data": {"id": ...}}`` in the body, and
    some notification versions only put ``type``/``topic`` and
    ``data.id``/``id`` in the query string.
    """
    body = body if isinstance(body, dict) else {}
    query = query or {}

    event_type = body.get("type") or body.get("topic") or query.get("type") or query.get("topic")

    data = body.get("data")
    resource_id = data.get("id") if isinstance(data, dict) else None
    resource_id = resource_id or query.get("data.id") or query.get("id")

    return (
        str(event_type) if event_type else None,
        str(resource_id) if resource_id else None,
    )


async def handle_preapproval_event(db: AsyncSession, preapproval_id: str) -> WebhookOutcome:
    """Handle ``subscription_preapproval`` — fetch the authoritative status and apply it."""
    preapproval = await get_preapproval(preapproval_id)

    status = preapproval.get("status")
    external_reference = preapproval.get("external_reference")
    payer_email = preapproval.get("payer_email")

    logger.info(
        "Preapproval %s reported status=%s (reference=%s)",
        preapproval_id,
        status,
        external_reference,
    )

    return await apply_webhook_status(
        db,
        gateway_subscription_id=str(preapproval.get("id") or preapproval_id),
        reported_status=status,
        payer_email=payer_email,
        external_reference=str(external_reference) if external_reference else None,
    )
