"""Favorites API endpoints — saved recipes with the free-tier cap."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.billing.plans import FREE_FAVORITES_LIMIT
from app.models.user import User
from app.schemas.recipe import FavoritesResponse, Recipe, ToggleFavoriteResponse
from app.services.favorites_service import add_favorite, list_favorites, remove_favorite, toggle_favorite

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/favorites", tags=["favorites"])


async def _favorites_response(db: AsyncSession, user: User) -> FavoritesResponse:
    favorites = await list_favorites(db, user)
    return FavoritesResponse(
        favorites=favorites,
        count=len(favorites),
        limit=None if user.is_premium else FREE_FAVORITES_LIMIT,
    )


@router.get("", response_model=FavoritesResponse, response_model_exclude_none=True)
async def get_favorites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FavoritesResponse:
    """List the user's saved recipes."""
    return await _favorites_response(db, current_user)


@router.post(
    "",
    response_model=FavoritesResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def save_favorite(
    recipe: Recipe,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FavoritesResponse:
    """Save a recipe (402 once a free user reaches the cap)."""
    await add_favorite(db, current_user, recipe)
    return await _favorites_response(db, current_user)


@router.post("/toggle", response_model=ToggleFavoriteResponse, response_model_exclude_none=True)
async def toggle(
    recipe: Recipe,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ToggleFavoriteResponse:
    """Remove the recipe if saved, otherwise save it."""
    is_favorite = await toggle_favorite(db, current_user, recipe)
    listing = await _favorites_response(db, current_user)
    return ToggleFavoriteResponse(
        favorites=listing.favorites,
        count=listing.count,
        limit=listing.limit,
        is_favorite=is_favorite,
    )


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_favorite(
    recipe_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> None:
    """Remove a saved recipe."""
    if not await remove_favorite(db, current_user, recipe_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="La receta no está en tus favoritos.",
        )
