"""Favorites service — saved recipes per user."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.billing.dependencies import check_favorite_limit
from app.database import utcnow
from app.models.favorite import Favorite
from app.models.user import User
from app.schemas.recipe import Recipe
from app.services.storage import LocalImageStorage, StorageError, storage

logger = logging.getLogger(__name__)


async def list_favorites(db: AsyncSession, user: User) -> list[Recipe]:
    """Return the user's favorites, oldest first."""
    result = await db.execute(
        select(Favorite).where(Favorite.user_id == user.id).order_by(Favorite.created_at, Favorite.id)
    )
    return [Recipe.model_validate(favorite.recipe) for favorite in result.scalars().all()]


async def get_favorite(db: AsyncSession, user: User, recipe_id: str) -> Favorite | None:
    result = await db.execute(
        select(Favorite).where(Favorite.user_id == user.id, Favorite.recipe_id == recipe_id)
    )
    return result.scalar_one_or_none()


async def _prepare_document(user: User, recipe: Recipe, image_storage: LocalImageStorage) -> dict:
    """Free users lose ``imageUrl``; premium images are moved to permanent storage."""
    if not user.is_premium:
        return recipe.to_document(include_image=False)

    image_url = recipe.image_url
    if image_url and not image_storage.is_stored_url(image_url):
        try:
            recipe = recipe.model_copy(
                update={"image_url": await image_storage.persist_recipe_image(str(user.id), recipe.id, image_url)}
            )
        except StorageError:
            logger.exception(
                "Storing image for recipe %s failed, saving with the original imageUrl", recipe.id
            )
    return recipe.to_document()


async def add_favorite(
    db: AsyncSession,
    user: User,
    recipe: Recipe,
    image_storage: LocalImageStorage = storage,
) -> Recipe:
    """Save a recipe. Saving an existing favorite returns it unchanged.

    Raises:
        HTTPException 402: a free user already holds the maximum.
    """
    existing = await get_favorite(db, user, recipe.id)
    if existing is not None:
        return Recipe.model_validate(existing.recipe)

    await check_favorite_limit(db, user)

    document = await _prepare_document(user, recipe, image_storage)
    db.add(Favorite(user_id=user.id, recipe_id=recipe.id, recipe=document, created_at=utcnow()))
    await db.flush()
    logger.info("User %s saved favorite %s", user.id, recipe.id)
    return Recipe.model_validate(document)


async def remove_favorite(db: AsyncSession, user: User, recipe_id: str) -> bool:
    """Delete a favorite. Returns False when it did not exist."""
    favorite = await get_favorite(db, user, recipe_id)
    if favorite is None:
        return False
    await db.delete(favorite)
    await db.flush()
    logger.info("User %s removed favorite %s", user.id, recipe_id)
    return True


async def toggle_favorite(
    db: AsyncSession,
    user: User,
    recipe: Recipe,
    image_storage: LocalImageStorage = storage,
) -> bool:
    """Remove the recipe if saved, otherwise save it. Returns the new state."""
    if await remove_favorite(db, user, recipe.id):
        return False
    await add_favorite(db, user, recipe, image_storage)
    return True
