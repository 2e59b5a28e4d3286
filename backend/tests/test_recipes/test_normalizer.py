"""Tests for LLM output normalization."""

import json

import pytest

from app.recipes.normalizer import (
    DEFAULT_DESCRIPTION,
    DEFAULT_DIFFICULTY,
    DEFAULT_PREPARATION_TIME,
    DEFAULT_TITLE,
    GenerationParseError,
    coerce_non_negative_int,
    coerce_text_list,
    extract_json_object,
    normalize_recipe,
    parse_recipe_text,
    strip_code_fences,
)

FULL_RECIPE = {
    "title": "Tarta de zapallitos",
    "description": "Una tarta liviana y sabrosa.",
    "preparationTime": "45 min",
    "difficulty": "Fácil",
    "calories": 420,
    "ingredientsNeeded": ["3 zapallitos", "2 huevos", "1 tapa de tarta"],
    "missingIngredients": ["queso rallado"],
    "instructions": ["Rallar los zapallitos.", "Mezclar con los huevos.", "Hornear 30 minutos."],
}


class TestExtractJsonObject:
    def test_plain_object(self):
        assert extract_json_object(json.dumps(FULL_RECIPE))["title"] == "Tarta de zapallitos"

    def test_code_fences(self):
        text = "```json\n" + json.dumps(FULL_RECIPE) + "\n```"
        assert extract_json_object(text)["calories"] == 420

    def test_surrounding_commentary(self):
        text = "¡Claro! Acá tenés tu receta:\n" + json.dumps(FULL_RECIPE) + "\n¡Buen provecho!"
        assert extract_json_object(text)["difficulty"] == "Fácil"

    @pytest.mark.parametrize("text", ["", "sin json", "{ title: nope }", "} al revés {", "[1, 2, 3]"])
    def test_unparseable(self, text):
        with pytest.raises(GenerationParseError):
            extract_json_object(text)

    def test_strip_code_fences(self):
        assert strip_code_fences("```JSON\n{}\n```") == "{}"


class TestNormalizeRecipe:
    def test_loose_types_are_coerced(self):
        recipe = normalize_recipe({"title": 123, "ingredientsNeeded": None, "calories": "450"})
        assert recipe.title == "123"
        assert recipe.ingredients_needed == []
        assert recipe.calories == 0

    def test_missing_fields_get_placeholders(self):
        recipe = normalize_recipe({})
        assert recipe.title == DEFAULT_TITLE
        assert recipe.description == DEFAULT_DESCRIPTION
        assert recipe.preparation_time == DEFAULT_PREPARATION_TIME
        assert recipe.difficulty == DEFAULT_DIFFICULTY
        assert recipe.calories == 0
        assert recipe.instructions == []
        assert recipe.macros is None

    def test_blank_title_falls_back(self):
        assert normalize_recipe({"title": "   "}).title == DEFAULT_TITLE

    def test_full_recipe_passes_through(self):
        recipe = normalize_recipe(FULL_RECIPE)
        assert recipe.title == FULL_RECIPE["title"]
        assert recipe.missing_ingredients == ["queso rallado"]
        assert len(recipe.instructions) == 3

    def test_free_text_difficulty_kept(self):
        assert normalize_recipe({"difficulty": "Intermedia-alta"}).difficulty == "Intermedia-alta"

    def test_image_url_from_model_dropped(self):
        assert normalize_recipe({"imageUrl": "https://example.com/x.png"}).image_url is None

    def test_recipes_wrapper_unwrapped(self):
        recipe = normalize_recipe({"recipes": [FULL_RECIPE, {"title": "Otra"}]})
        assert recipe.title == FULL_RECIPE["title"]

    def test_macros(self):
        recipe = normalize_recipe({"macros": {"protein": 25.6, "carbs": "x", "fat": -3}})
        assert recipe.macros.protein == 26
        assert recipe.macros.carbs == 0
        assert recipe.macros.fat == 0

    def test_macros_not_an_object(self):
        assert normalize_recipe({"macros": [1, 2, 3]}).macros is None

    def test_ids_are_unique(self):
        ids = {normalize_recipe(FULL_RECIPE).id for _ in range(20)}
        assert len(ids) == 20

    def test_non_object_rejected(self):
        with pytest.raises(GenerationParseError):
            normalize_recipe(["no", "es", "receta"])


class TestCoercion:
    @pytest.mark.parametrize(
        "value, expected",
        [(450, 450), (12.4, 12), (-5, 0), (True, 0), ("300", 0), (None, 0), (float("nan"), 0)],
    )
    def test_non_negative_int(self, value, expected):
        assert coerce_non_negative_int(value) == expected

    def test_text_list(self):
        assert coerce_text_list(["a", 2, None, 3.0]) == ["a", "2", "null", "3"]
        assert coerce_text_list("a, b") == []

    def test_instruction_positions_kept(self):
        recipe = normalize_recipe({"instructions": ["Paso 1", None, "Paso 3"]})
        assert recipe.instructions == ["Paso 1", "null", "Paso 3"]


def test_parse_recipe_text_end_to_end():
    text = "```json\n" + json.dumps({**FULL_RECIPE, "calories": 512.7}) + "\n```"
    recipe = parse_recipe_text(text)
    assert recipe.calories == 513
    assert recipe.id
    assert recipe.to_document(include_image=False)["preparationTime"] == "45 min"
