"""Mercado Pago webhook endpoint — always acknowledges, never retries on our side."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.billing.webhooks import PREAPPROVAL_EVENT, extract_notification, handle_preapproval_event
from app.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/webhooks", tags=["webhooks"])


@router.post("/mercadopago")
async def mercadopago_webhook(request: Request, db: AsyncSession = Depends(get_db)) -> dict[str, str]:
    """Receive a Mercado Pago notification.

    Responds 200 whatever happens: errors are logged, not surfaced, so the
    gateway's retries cannot turn a transient failure into a delivery storm.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    event_type, resource_id = extract_notification(body, dict(request.query_params))

    if event_type != PREAPPROVAL_EVENT:
        logger.debug("Ignoring webhook notification type: %s", event_type)
        return {"status": "ignored"}

    if not resource_id:
        logger.warning("Preapproval notification without data.id, acknowledging")
        return {"status": "unresolved"}

    logger.info("Processing preapproval notification %s", resource_id)

    try:
        outcome = await handle_preapproval_event(db, resource_id)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Error processing preapproval notification %s", resource_id)
        return {"status": "error"}

    return {"status": "processed" if outcome.resolved else "unresolved"}
