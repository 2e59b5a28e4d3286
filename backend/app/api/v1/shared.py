"""Shared recipe API endpoints — permalinks anyone can open."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.recipe import Recipe, SharedRecipeResponse, ShareRecipeResponse
from app.services.shared_recipe_service import (
    get_share_url,
    get_shared_recipe,
    get_whatsapp_share_url,
    share_recipe,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/shared", tags=["shared"])


@router.post("", response_model=ShareRecipeResponse)
async def create_share(
    recipe: Recipe,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ShareRecipeResponse:
    """Publish a recipe and return its share links."""
    shared = await share_recipe(db, recipe)
    title = shared.recipe.get("title", recipe.title)
    logger.info("User %s shared recipe %s", current_user.id, shared.recipe_id)
    return ShareRecipeResponse(
        recipe_id=shared.recipe_id,
        share_url=get_share_url(shared.recipe_id),
        whatsapp_url=get_whatsapp_share_url(shared.recipe_id, title),
    )


@router.get("/{recipe_id}", response_model=SharedRecipeResponse, response_model_exclude_none=True)
async def read_shared(recipe_id: str, db: AsyncSession = Depends(get_db)) -> SharedRecipeResponse:
    """Public: fetch a shared recipe."""
    shared = await get_shared_recipe(db, recipe_id)
    if shared is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No encontramos esta receta.",
        )
    return SharedRecipeResponse(recipe=Recipe.model_validate(shared.recipe), shared_at=shared.shared_at)
