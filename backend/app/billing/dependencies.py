"""Plan gating dependencies — enforce free-tier limits and premium-only features."""

import logging
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_active_user
from app.billing.entitlements import can_add_favorite
from app.billing.plans import FREE_FAVORITES_LIMIT
from app.config import settings
from app.database import get_db, utcnow
from app.models.favorite import Favorite
from app.models.image_usage import ImageUsage
from app.models.user import User

logger = logging.getLogger(__name__)

UPGRADE_URL = "/api/v1/billing/subscription"


def premium_required_error(message: str = "Esta función es exclusiva para usuarios Chef Pro") -> HTTPException:
    """403 with a distinct code so the client can show the upsell."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={
            "code": "premium_required",
            "message": message,
            "upgrade_url": UPGRADE_URL,
        },
    )


def _day_start(now: datetime) -> datetime:
    return datetime(now.year, now.month, now.day)


async def require_premium(user: User = Depends(get_current_active_user)) -> User:
    """Raise 403 unless the user's entitlement record says premium."""
    if not user.is_premium:
        raise premium_required_error()
    return user


async def count_favorites(db: AsyncSession, user: User) -> int:
    result = await db.execute(
        select(func.count()).select_from(Favorite).where(Favorite.user_id == user.id)
    )
    return result.scalar_one()


async def check_favorite_limit(db: AsyncSession, user: User) -> None:
    """Raise 402 if a free user already holds FREE_FAVORITES_LIMIT favorites.

    Soft limit: two concurrent adds may both pass.
    """
    current_count = await count_favorites(db, user)
    if can_add_favorite(current_count, user.is_premium):
        return

    raise HTTPException(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        detail={
            "code": "favorites_limit",
            "message": (
                f"Alcanzaste el límite de {FREE_FAVORITES_LIMIT} favoritos del plan gratuito. "
                "Pasate a Chef Pro para guardar recetas sin límite."
            ),
            "limit": FREE_FAVORITES_LIMIT,
            "current": current_count,
            "upgrade_url": UPGRADE_URL,
        },
    )


async def count_images_today(db: AsyncSession, user: User) -> int:
    day_start = _day_start(utcnow())
    result = await db.execute(
        select(func.count())
        .select_from(ImageUsage)
        .where(
            ImageUsage.user_id == user.id,
            ImageUsage.created_at >= day_start,
            ImageUsage.created_at < day_start + timedelta(days=1),
        )
    )
    return result.scalar_one()


async def has_image_quota(db: AsyncSession, user: User) -> bool:
    return await count_images_today(db, user) < settings.premium_daily_image_limit


async def check_image_quota(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_premium),
) -> User:
    """Raise 429 if the premium user has used up today's image generations."""
    current_count = await count_images_today(db, user)
    if current_count >= settings.premium_daily_image_limit:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "code": "image_quota_exhausted",
                "message": (
                    "Alcanzaste el límite de imágenes diarias de tu plan Chef Pro. "
                    "Mañana vas a tener nuevas imágenes disponibles."
                ),
                "limit": settings.premium_daily_image_limit,
                "current": current_count,
            },
        )
    return user


async def record_image_usage(db: AsyncSession, user: User, model: str) -> None:
    db.add(ImageUsage(user_id=user.id, model=model, created_at=utcnow()))
    await db.flush()
