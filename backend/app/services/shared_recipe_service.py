"""Shared recipes — public permalinks and WhatsApp links."""

import logging
from urllib.parse import quote

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import utcnow
from app.models.shared_recipe import SharedRecipe
from app.schemas.recipe import Recipe

logger = logging.getLogger(__name__)


async def share_recipe(db: AsyncSession, recipe: Recipe) -> SharedRecipe:
    """Publish a recipe under its own id. An existing share is kept as is."""
    shared = await db.get(SharedRecipe, recipe.id)
    if shared is not None:
        return shared

    shared = SharedRecipe(
        recipe_id=recipe.id,
        recipe=recipe.to_document(include_image=False),
        shared_at=utcnow(),
    )
    db.add(shared)
    await db.flush()
    logger.info("Shared recipe %s", recipe.id)
    return shared


async def get_shared_recipe(db: AsyncSession, recipe_id: str) -> SharedRecipe | None:
    if not recipe_id:
        return None
    return await db.get(SharedRecipe, recipe_id)


def get_share_url(recipe_id: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/recipe/{recipe_id}"


def get_whatsapp_share_url(recipe_id: str, recipe_title: str) -> str:
    message = f"¡Mirá esta receta que encontré! {recipe_title} {get_share_url(recipe_id)}"
    return f"https://wa.me/?text={quote(message, safe='')}"
