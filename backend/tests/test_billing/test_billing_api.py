"""Tests for billing API endpoints with mocked Mercado Pago calls."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.billing.mercadopago_client import MercadoPagoError
from app.models.user import User
from app.services.subscription_service import apply_webhook_status, get_subscription_for_user

CHECKOUT_URL = "https://www.mercadopago.com.ar/subscriptions/checkout?preapproval_id=pre-1"


def _created(preapproval_id: str = "pre-1") -> dict:
    return {"id": preapproval_id, "init_point": CHECKOUT_URL, "status": "pending"}


class TestListPlans:
    async def test_public_plans(self, client: AsyncClient):
        response = await client.get("/api/v1/billing/plans")
        assert response.status_code == 200
        data = response.json()
        assert data["freeFavoritesLimit"] == 3
        plans = {p["planType"]: p for p in data["plans"]}
        assert set(plans) == {"monthly", "yearly"}
        assert plans["yearly"]["amount"] == 29400
        assert plans["yearly"]["frequency"] == 12
        assert plans["monthly"]["currency"] == "ARS"


class TestCreateSubscription:
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/v1/billing/subscription", json={"planType": "monthly"})
        assert response.status_code == 401

    async def test_yearly_checkout(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers: dict
    ):
        with patch(
            "app.api.v1.billing.create_preapproval",
            new_callable=AsyncMock,
            return_value=_created(),
        ) as mock_create:
            response = await client.post(
                "/api/v1/billing/subscription",
                json={"email": "pagador@test.com", "planType": "yearly"},
                headers=auth_headers,
            )

        assert response.status_code == 200
        data = response.json()
        assert data == {"success": True, "initPoint": CHECKOUT_URL, "subscriptionId": "pre-1"}

        kwargs = mock_create.await_args.kwargs
        assert kwargs["amount"] == 29400
        assert kwargs["frequency"] == 12
        assert kwargs["external_reference"] == str(test_user.id)
        assert kwargs["payer_email"] == "pagador@test.com"
        assert kwargs["back_url"].endswith("/subscription/success")

        sub = await get_subscription_for_user(db_session, test_user.id)
        assert sub.status == "pending"
        assert sub.amount == 29400
        assert sub.gateway_subscription_id == "pre-1"
        assert test_user.is_premium is False

    async def test_defaults_to_account_email(
        self, client: AsyncClient, test_user: User, auth_headers: dict
    ):
        with patch(
            "app.api.v1.billing.create_preapproval",
            new_callable=AsyncMock,
            return_value=_created(),
        ) as mock_create:
            response = await client.post("/api/v1/billing/subscription", json={}, headers=auth_headers)

        assert response.status_code == 200
        assert mock_create.await_args.kwargs["payer_email"] == test_user.email
        assert mock_create.await_args.kwargs["amount"] == 3500

    async def test_untrusted_frontend_url_ignored(self, client: AsyncClient, auth_headers: dict):
        with patch(
            "app.api.v1.billing.create_preapproval",
            new_callable=AsyncMock,
            return_value=_created(),
        ) as mock_create:
            await client.post(
                "/api/v1/billing/subscription",
                json={"frontendUrl": "https://evil.example.com"},
                headers=auth_headers,
            )

        assert "evil.example.com" not in mock_create.await_args.kwargs["back_url"]

    async def test_blank_email_rejected(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers: dict
    ):
        test_user.email = ""
        await db_session.flush()
        with patch("app.api.v1.billing.create_preapproval", new_callable=AsyncMock) as mock_create:
            response = await client.post(
                "/api/v1/billing/subscription", json={"email": "  "}, headers=auth_headers
            )
        assert response.status_code == 400
        mock_create.assert_not_called()

    async def test_invalid_plan_rejected(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/v1/billing/subscription", json={"planType": "lifetime"}, headers=auth_headers
        )
        assert response.status_code == 422

    async def test_gateway_failure_is_502(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers: dict
    ):
        with patch(
            "app.api.v1.billing.create_preapproval",
            new_callable=AsyncMock,
            side_effect=MercadoPagoError("invalid token", status_code=401),
        ):
            response = await client.post(
                "/api/v1/billing/subscription", json={"planType": "monthly"}, headers=auth_headers
            )
        assert response.status_code == 502
        assert await get_subscription_for_user(db_session, test_user.id) is None

    async def test_missing_init_point_is_502(self, client: AsyncClient, auth_headers: dict):
        with patch(
            "app.api.v1.billing.create_preapproval",
            new_callable=AsyncMock,
            return_value={"id": "pre-1"},
        ):
            response = await client.post("/api/v1/billing/subscription", json={}, headers=auth_headers)
        assert response.status_code == 502


class TestCancelSubscription:
    async def test_no_subscription_is_404(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/v1/billing/subscription/cancel", headers=auth_headers)
        assert response.status_code == 404

    async def test_cancel_revokes_premium(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers: dict
    ):
        with patch("app.api.v1.billing.create_preapproval", new_callable=AsyncMock, return_value=_created()):
            await client.post("/api/v1/billing/subscription", json={}, headers=auth_headers)
        await apply_webhook_status(db_session, "pre-1", "authorized")
        assert test_user.is_premium is True

        with patch(
            "app.api.v1.billing.cancel_preapproval",
            new_callable=AsyncMock,
            return_value={"id": "pre-1", "status": "cancelled"},
        ) as mock_cancel:
            response = await client.post("/api/v1/billing/subscription/cancel", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        mock_cancel.assert_awaited_once_with("pre-1")
        assert test_user.is_premium is False
        assert test_user.premium_ended_at is not None
        sub = await get_subscription_for_user(db_session, test_user.id)
        assert sub.status == "cancelled"

    async def test_gateway_failure_keeps_premium(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers: dict
    ):
        with patch("app.api.v1.billing.create_preapproval", new_callable=AsyncMock, return_value=_created()):
            await client.post("/api/v1/billing/subscription", json={}, headers=auth_headers)
        await apply_webhook_status(db_session, "pre-1", "active")

        with patch(
            "app.api.v1.billing.cancel_preapproval",
            new_callable=AsyncMock,
            side_effect=MercadoPagoError("timeout"),
        ):
            response = await client.post("/api/v1/billing/subscription/cancel", headers=auth_headers)

        assert response.status_code == 502
        assert test_user.is_premium is True


class TestPremiumStatus:
    async def test_free_user(self, client: AsyncClient, auth_headers: dict):
        response = await client.get("/api/v1/billing/status", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["isPremium"] is False
        assert data["status"] is None

    async def test_premium_user(self, client: AsyncClient, premium_headers: dict):
        response = await client.get("/api/v1/billing/status", headers=premium_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["isPremium"] is True
        assert data["premiumSince"] is not None
