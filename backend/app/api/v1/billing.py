"""Billing API endpoints — Chef Pro checkout, cancellation and premium status."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.billing.mercadopago_client import MercadoPagoError, cancel_preapproval, create_preapproval
from app.billing.plans import FREE_FAVORITES_LIMIT, PLANS, get_plan
from app.config import settings
from app.models.user import User
from app.schemas.billing import (
    CancelSubscriptionResponse,
    CreateSubscriptionRequest,
    CreateSubscriptionResponse,
    PlanResponse,
    PlansListResponse,
    PremiumStatusResponse,
)
from app.services.subscription_service import (
    get_subscription_for_user,
    mark_cancelled,
    upsert_pending_subscription,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/billing", tags=["billing"])

GATEWAY_ERROR_MESSAGE = "No se pudo comunicar con Mercado Pago. Intentá nuevamente en unos minutos."


def _back_url(frontend_url: str | None) -> str:
    """Checkout return URL. Only configured origins are honored."""
    base = frontend_url if frontend_url and frontend_url in settings.cors_origins else settings.frontend_url
    return f"{base.rstrip('/')}/subscription/success"


@router.get("/plans", response_model=PlansListResponse)
async def list_plans() -> PlansListResponse:
    """List Chef Pro plans (public — no auth required)."""
    return PlansListResponse(
        plans=[
            PlanResponse(
                plan_type=p.plan_type,
                plan_name=p.plan_name,
                amount=p.amount,
                currency=p.currency,
                frequency=p.frequency,
                frequency_type=p.frequency_type,
            )
            for p in PLANS.values()
        ],
        free_favorites_limit=FREE_FAVORITES_LIMIT,
    )


@router.post("/subscription", response_model=CreateSubscriptionResponse)
async def create_subscription(
    body: CreateSubscriptionRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> CreateSubscriptionResponse:
    """Create a pending preapproval and return its checkout link."""
    email = (body.email or current_user.email or "").strip()
    if not email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Se requiere un email para crear la suscripción.",
        )

    # Price comes from the static catalogue, never from the request
    plan = get_plan(body.plan_type)
    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Plan inválido. Elegí 'monthly' o 'yearly'.",
        )

    try:
        preapproval = await create_preapproval(
            reason=plan.plan_name,
            external_reference=str(current_user.id),
            payer_email=email,
            back_url=_back_url(body.frontend_url),
            amount=plan.amount,
            currency=plan.currency,
            frequency=plan.frequency,
            frequency_type=plan.frequency_type,
        )
    except MercadoPagoError as e:
        logger.error("Mercado Pago preapproval error for user %s: %s", current_user.id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=GATEWAY_ERROR_MESSAGE,
        ) from e

    preapproval_id = preapproval.get("id")
    init_point = preapproval.get("init_point")
    if not preapproval_id or not init_point:
        logger.error("Preapproval response without id/init_point: %s", preapproval)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=GATEWAY_ERROR_MESSAGE,
        )

    await upsert_pending_subscription(
        db,
        user=current_user,
        plan=plan,
        email=email,
        gateway_subscription_id=str(preapproval_id),
    )

    return CreateSubscriptionResponse(
        success=True,
        init_point=init_point,
        subscription_id=str(preapproval_id),
    )


@router.post("/subscription/cancel", response_model=CancelSubscriptionResponse)
async def cancel_subscription(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> CancelSubscriptionResponse:
    """Cancel the user's preapproval at the gateway and revoke premium."""
    subscription = await get_subscription_for_user(db, current_user.id)
    if subscription is None or not subscription.gateway_subscription_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No se encontró una suscripción activa.",
        )

    try:
        await cancel_preapproval(subscription.gateway_subscription_id)
    except MercadoPagoError as e:
        logger.error(
            "Mercado Pago cancel error for preapproval %s: %s",
            subscription.gateway_subscription_id,
            e,
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=GATEWAY_ERROR_MESSAGE,
        ) from e

    await mark_cancelled(db, current_user, subscription)
    return CancelSubscriptionResponse(success=True)


@router.get("/status", response_model=PremiumStatusResponse)
async def premium_status(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PremiumStatusResponse:
    """Current entitlement, as cached on the user record."""
    subscription = await get_subscription_for_user(db, current_user.id)
    return PremiumStatusResponse(
        is_premium=current_user.is_premium,
        status=subscription.status if subscription else None,
        plan_type=subscription.plan_type if subscription else None,
        premium_since=current_user.premium_since,
        premium_ended_at=current_user.premium_ended_at,
    )
