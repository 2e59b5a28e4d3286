"""Turn raw LLM output into a validated :class:`Recipe`.

Only an unparseable root is an error (:class:`GenerationParseError`). Every
field is coerced on its own and never fails: strings fall back to fixed
Spanish placeholders, lists become lists of strings, numbers default to 0.
"""

import json
import logging
import math
import re
import uuid
from typing import Any

from app.schemas.recipe import Macros, Recipe

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)

DEFAULT_TITLE = "Receta sin título"
DEFAULT_DESCRIPTION = "Sin descripción disponible."
DEFAULT_PREPARATION_TIME = "-- min"
DEFAULT_DIFFICULTY = "Media"


class GenerationParseError(ValueError):
    """The model's answer holds no parseable JSON object."""


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json ... ```) around the payload."""
    return _FENCE_RE.sub("", text).strip()


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the slice between the first ``{`` and the last ``}``.

    Raises:
        GenerationParseError: no bracket pair, invalid JSON, or not an object.
    """
    cleaned = strip_code_fences(text or "")
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise GenerationParseError("No JSON object found in model response")

    try:
        parsed = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as e:
        raise GenerationParseError(f"Invalid JSON in model response: {e.msg}") from e

    if not isinstance(parsed, dict):
        raise GenerationParseError("Model response is not a JSON object")
    return parsed


def _to_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def coerce_text(value: Any, fallback: str) -> str:
    if value is None:
        return fallback
    text = _to_text(value).strip()
    return text or fallback


def coerce_text_list(value: Any) -> list[str]:
    """Every element becomes a string; positions are kept, so step numbering holds."""
    if not isinstance(value, list):
        return []
    return [_to_text(item) for item in value]


def coerce_non_negative_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(0, int(round(value)))


def coerce_macros(value: Any) -> Macros | None:
    if not isinstance(value, dict):
        return None
    return Macros(
        protein=coerce_non_negative_int(value.get("protein")),
        carbs=coerce_non_negative_int(value.get("carbs")),
        fat=coerce_non_negative_int(value.get("fat")),
    )


def new_recipe_id() -> str:
    """Fresh id per generation, never derived from content."""
    return uuid.uuid4().hex


def normalize_recipe(raw: Any) -> Recipe:
    """Coerce one loosely-typed recipe object into a :class:`Recipe`.

    A wrapper such as ``{"recipes": [{...}]}`` is unwrapped to its first
    object. ``imageUrl`` is never taken from the model.
    """
    if isinstance(raw, dict) and isinstance(raw.get("recipes"), list):
        candidates = [item for item in raw["recipes"] if isinstance(item, dict)]
        if candidates:
            raw = candidates[0]

    if not isinstance(raw, dict):
        raise GenerationParseError("Recipe payload is not a JSON object")

    return Recipe(
        id=new_recipe_id(),
        title=coerce_text(raw.get("title"), DEFAULT_TITLE),
        description=coerce_text(raw.get("description"), DEFAULT_DESCRIPTION),
        preparation_time=coerce_text(raw.get("preparationTime"), DEFAULT_PREPARATION_TIME),
        difficulty=coerce_text(raw.get("difficulty"), DEFAULT_DIFFICULTY),
        calories=coerce_non_negative_int(raw.get("calories")),
        ingredients_needed=coerce_text_list(raw.get("ingredientsNeeded")),
        missing_ingredients=coerce_text_list(raw.get("missingIngredients")),
        instructions=coerce_text_list(raw.get("instructions")),
        image_url=None,
        macros=coerce_macros(raw.get("macros")),
    )


def parse_recipe_text(text: str) -> Recipe:
    """Full pipeline: strip fences, slice the object, parse, normalize."""
    recipe = normalize_recipe(extract_json_object(text))
    logger.debug("Normalized recipe %s (%r)", recipe.id, recipe.title)
    return recipe
