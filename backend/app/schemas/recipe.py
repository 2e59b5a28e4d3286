"""Pydantic v2 schemas for recipes, generation, images, favorites and sharing.

Field names are snake_case in Python and camelCase on the wire, matching the
web client's ``Recipe`` shape.
"""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class Macros(CamelModel):
    """Per-serving macronutrients in grams."""

    protein: int = Field(0, ge=0)
    carbs: int = Field(0, ge=0)
    fat: int = Field(0, ge=0)


class Recipe(CamelModel):
    """A normalized recipe."""

    id: str = Field(..., min_length=1, max_length=64)
    title: str
    description: str
    preparation_time: str
    difficulty: str
    calories: int = Field(0, ge=0)
    ingredients_needed: list[str] = []
    missing_ingredients: list[str] = []
    instructions: list[str] = []
    image_url: str | None = None
    macros: Macros | None = None

    def to_document(self, include_image: bool = True) -> dict:
        """Serialize for storage, optionally without ``imageUrl``."""
        exclude = None if include_image else {"image_url"}
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)


# --- Request schemas ---


class DietFilters(CamelModel):
    """Dietary restrictions requested for a generation."""

    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False

    def requested(self) -> list[str]:
        """Names of the filters switched on."""
        return [name for name, enabled in self.model_dump().items() if enabled]


class GenerateRecipesRequest(CamelModel):
    """Recipe-generation RPC input."""

    ingredients: list[str] = []
    use_strict_matching: bool = False
    exclude_recipes: list[str] = []
    is_premium: bool = False  # advisory; the stored entitlement decides
    diet_filters: DietFilters = DietFilters()
    should_generate_image: bool = False


class GenerateImageRequest(CamelModel):
    """Single-image-generation RPC input."""

    title: str = ""
    is_premium: bool = False


class AddHistoryRequest(CamelModel):
    """Ingredient set to remember."""

    ingredients: list[str] = []


# --- Response schemas ---


class GenerateRecipesResponse(CamelModel):
    """Always one recipe today; a list for forward compatibility."""

    recipes: list[Recipe]


class GenerateImageResponse(CamelModel):
    image_url: str


class FavoritesResponse(CamelModel):
    favorites: list[Recipe]
    count: int
    limit: int | None  # None = unlimited


class ToggleFavoriteResponse(FavoritesResponse):
    is_favorite: bool


class ShareRecipeResponse(CamelModel):
    recipe_id: str
    share_url: str
    whatsapp_url: str


class SharedRecipeResponse(CamelModel):
    recipe: Recipe
    shared_at: datetime


class HistoryResponse(CamelModel):
    history: list[list[str]]
