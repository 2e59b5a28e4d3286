"""Async Mercado Pago preapproval (subscription) API wrapper."""

import logging
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class MercadoPagoError(Exception):
    """Raised when the gateway is unreachable or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def get_mercadopago_client() -> httpx.AsyncClient:
    """Create an authenticated AsyncClient for the Mercado Pago REST API."""
    return httpx.AsyncClient(
        base_url=settings.mercadopago_api_url,
        headers={
            "Authorization": f"Bearer {settings.mercadopago_access_token}",
            "Content-Type": "application/json",
        },
        timeout=settings.mercadopago_timeout_seconds,
    )


async def _request(method: str, path: str, json: dict | None = None) -> dict[str, Any]:
    async with get_mercadopago_client() as client:
        try:
            response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise MercadoPagoError(f"Mercado Pago request failed: {e}") from e

    if response.status_code >= 400:
        try:
            body = response.json()
            message = body.get("message") or body.get("error") or response.text
        except ValueError:
            message = response.text
        raise MercadoPagoError(str(message), status_code=response.status_code)

    return response.json()


async def create_preapproval(
    *,
    reason: str,
    external_reference: str,
    payer_email: str,
    back_url: str,
    amount: int,
    currency: str,
    frequency: int,
    frequency_type: str,
) -> dict[str, Any]:
    """Create a pending preapproval and return it (includes ``id`` and ``init_point``)."""
    logger.info(
        "Creating preapproval for reference %s (%s %s every %d %s)",
        external_reference,
        amount,
        currency,
        frequency,
        frequency_type,
    )
    preapproval = await _request(
        "POST",
        "/preapproval",
        json={
            "reason": reason,
            "external_reference": external_reference,
            "payer_email": payer_email,
            "back_url": back_url,
            "auto_recurring": {
                "frequency": frequency,
                "frequency_type": frequency_type,
                "transaction_amount": amount,
                "currency_id": currency,
            },
            "status": "pending",
        },
    )
    logger.info("Created preapproval %s for reference %s", preapproval.get("id"), external_reference)
    return preapproval


async def get_preapproval(preapproval_id: str) -> dict[str, Any]:
    """Retrieve a preapproval by ID."""
    return await _request("GET", f"/preapproval/{preapproval_id}")


async def cancel_preapproval(preapproval_id: str) -> dict[str, Any]:
    """Cancel a preapproval at the gateway."""
    logger.info("Cancelling preapproval %s", preapproval_id)
    return await _request("PUT", f"/preapproval/{preapproval_id}", json={"status": "cancelled"})
