"""Recipe API endpoints — generation from ingredients and dish photos."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.billing.dependencies import (
    check_image_quota,
    has_image_quota,
    premium_required_error,
    record_image_usage,
)
from app.billing.entitlements import can_generate_image, can_use_diet_filter
from app.config import settings
from app.models.user import User
from app.recipes.generator import RecipeGenerationError, generate_recipe
from app.recipes.images import ImageGenerationError, generate_image_data_uri, generate_image_with_timeout
from app.recipes.normalizer import GenerationParseError
from app.schemas.recipe import (
    GenerateImageRequest,
    GenerateImageResponse,
    GenerateRecipesRequest,
    GenerateRecipesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


@router.post("/generate", response_model=GenerateRecipesResponse, response_model_exclude_none=True)
async def generate_recipes(
    body: GenerateRecipesRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> GenerateRecipesResponse:
    """Suggest one recipe for the given ingredients."""
    ingredients = [i.strip() for i in body.ingredients if i and i.strip()]
    if not ingredients:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Se requiere una lista de ingredientes válida",
        )

    # The stored entitlement decides; the client flag is only a hint
    is_premium = current_user.is_premium
    if body.is_premium and not is_premium:
        logger.info("User %s claimed premium without entitlement", current_user.id)

    diet_filters = body.diet_filters.requested()
    for diet in diet_filters:
        if not can_use_diet_filter(diet, is_premium):
            raise premium_required_error("Este filtro está disponible en el plan Chef Pro")

    try:
        recipe = await generate_recipe(
            ingredients,
            body.use_strict_matching,
            exclude_recipes=body.exclude_recipes,
            diet_filters=diet_filters,
            include_macros=is_premium,
        )
    except GenerationParseError as e:
        logger.error("Could not parse recipe for user %s: %s", current_user.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al procesar la respuesta del servidor. Intentá nuevamente.",
        ) from e
    except RecipeGenerationError as e:
        logger.error("Recipe generation failed for user %s: %s", current_user.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo generar la receta. Intentá nuevamente.",
        ) from e

    if can_generate_image(is_premium, body.should_generate_image):
        if await has_image_quota(db, current_user):
            # Image failure or timeout never fails the recipe
            image_url = await generate_image_with_timeout(recipe.title)
            if image_url:
                recipe.image_url = image_url
                await record_image_usage(db, current_user, settings.image_model)
        else:
            logger.info("User %s is out of daily images, returning recipe without one", current_user.id)

    return GenerateRecipesResponse(recipes=[recipe])


@router.post("/image", response_model=GenerateImageResponse)
async def generate_single_image(
    body: GenerateImageRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> GenerateImageResponse:
    """Generate a photo for a recipe title (Chef Pro only)."""
    title = body.title.strip()
    if not title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Se requiere el título de la receta",
        )

    if not (body.is_premium and current_user.is_premium):
        raise premium_required_error()

    await check_image_quota(db=db, user=current_user)

    try:
        image_url = await generate_image_data_uri(title)
    except ImageGenerationError as e:
        logger.warning("No image for %r: %s", title, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo generar la imagen en este momento. Intentá nuevamente.",
        ) from e
    except Exception as e:
        logger.exception("Image backend error for %r", title)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo generar la imagen en este momento. Intentá nuevamente.",
        ) from e

    await record_image_usage(db, current_user, settings.image_model)
    return GenerateImageResponse(image_url=image_url)
