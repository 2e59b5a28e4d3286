"""Tests for shared recipe permalinks."""

from urllib.parse import unquote

from httpx import AsyncClient

from app.config import settings

SHARED_URL = "/api/v1/shared"

RECIPE = {
    "id": "c0ffee00c0ffee00c0ffee00c0ffee00",
    "title": "Empanadas salteñas",
    "description": "Jugosas y picantes.",
    "preparationTime": "90 min",
    "difficulty": "Difícil",
    "calories": 520,
    "ingredientsNeeded": ["carne cortada a cuchillo", "papa", "tapas"],
    "missingIngredients": [],
    "instructions": ["Preparar el relleno.", "Armar.", "Hornear."],
    "imageUrl": "data:image/png;base64,iVBORw==",
}


async def test_share_and_read_publicly(client: AsyncClient, auth_headers: dict):
    response = await client.post(SHARED_URL, json=RECIPE, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["recipeId"] == RECIPE["id"]
    assert data["shareUrl"] == f"{settings.frontend_url}/recipe/{RECIPE['id']}"
    assert data["whatsappUrl"].startswith("https://wa.me/?text=")
    message = unquote(data["whatsappUrl"].split("text=", 1)[1])
    assert "Empanadas salteñas" in message
    assert data["shareUrl"] in message

    response = await client.get(f"{SHARED_URL}/{RECIPE['id']}")
    assert response.status_code == 200
    shared = response.json()
    assert shared["recipe"]["title"] == "Empanadas salteñas"
    assert "imageUrl" not in shared["recipe"]
    assert shared["sharedAt"]


async def test_sharing_twice_keeps_first(client: AsyncClient, auth_headers: dict):
    await client.post(SHARED_URL, json=RECIPE, headers=auth_headers)
    response = await client.post(SHARED_URL, json={**RECIPE, "title": "Otro título"}, headers=auth_headers)
    assert response.status_code == 200

    shared = (await client.get(f"{SHARED_URL}/{RECIPE['id']}")).json()
    assert shared["recipe"]["title"] == "Empanadas salteñas"


async def test_share_requires_auth(client: AsyncClient):
    response = await client.post(SHARED_URL, json=RECIPE)
    assert response.status_code == 401


async def test_unknown_recipe_is_404(client: AsyncClient):
    response = await client.get(f"{SHARED_URL}/does-not-exist")
    assert response.status_code == 404
