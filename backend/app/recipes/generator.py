"""Recipe generation — prompt the LLM through LiteLLM and normalize its answer."""

import logging
import os

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_litellm import ChatLiteLLM

from app.config import settings
from app.recipes.normalizer import parse_recipe_text
from app.recipes.prompts import SYSTEM_PROMPT, build_recipe_prompt
from app.schemas.recipe import Recipe

logger = logging.getLogger(__name__)


class RecipeGenerationError(Exception):
    """The LLM call failed or returned nothing."""


def create_llm() -> ChatLiteLLM:
    """Create a ChatLiteLLM instance for the configured model."""
    if settings.gemini_api_key:
        os.environ["GEMINI_API_KEY"] = settings.gemini_api_key
    return ChatLiteLLM(
        model=settings.default_llm_model,
        temperature=settings.llm_temperature,
    )


def _message_text(content) -> str:
    """Flatten LangChain message content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


async def generate_recipe(
    ingredients: list[str],
    use_strict_matching: bool,
    exclude_recipes: list[str] | None = None,
    diet_filters: list[str] | None = None,
    include_macros: bool = False,
    llm: ChatLiteLLM | None = None,
) -> Recipe:
    """Ask the LLM for one recipe.

    Raises:
        RecipeGenerationError: the LLM call failed or returned empty text.
        GenerationParseError: the answer holds no parseable recipe object.
    """
    prompt = build_recipe_prompt(
        ingredients,
        use_strict_matching,
        exclude_recipes=exclude_recipes,
        diet_filters=diet_filters,
        include_macros=include_macros,
    )
    llm = llm or create_llm()

    logger.info(
        "Generating recipe from %d ingredients (strict=%s, diets=%s)",
        len(ingredients),
        use_strict_matching,
        diet_filters or [],
    )
    try:
        response = await llm.ainvoke([SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)])
    except Exception as e:
        raise RecipeGenerationError(f"LLM call failed: {e}") from e

    text = _message_text(response.content)
    if not text.strip():
        raise RecipeGenerationError("LLM returned an empty response")

    recipe = parse_recipe_text(text)
    if not include_macros:
        recipe.macros = None
    return recipe
