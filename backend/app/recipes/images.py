"""Dish photo generation with Gemini (google-genai)."""

import asyncio
import base64
import logging

from google import genai
from google.genai import types

from app.config import settings
from app.recipes.prompts import build_image_prompt

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    """The image model returned no picture."""


def get_genai_client() -> genai.Client:
    return genai.Client(api_key=settings.gemini_api_key)


async def generate_image_data_uri(title: str, client: genai.Client | None = None) -> str:
    """Generate a photo of ``title`` and return it as a ``data:`` URI.

    Raises:
        ImageGenerationError: the response carried no inline image.
    """
    client = client or get_genai_client()
    response = await client.aio.models.generate_content(
        model=settings.image_model,
        contents=build_image_prompt(title),
        config=types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=types.ImageConfig(aspect_ratio="4:3"),
        ),
    )

    for candidate in response.candidates or []:
        content = candidate.content
        for part in (content.parts if content else None) or []:
            inline = part.inline_data
            if inline is not None and inline.data:
                encoded = base64.b64encode(inline.data).decode("ascii")
                return f"data:{inline.mime_type or 'image/png'};base64,{encoded}"

    raise ImageGenerationError(f"Image model returned no image for {title!r}")


async def generate_image_with_timeout(title: str, timeout: float | None = None) -> str | None:
    """Bounded image generation: timeouts and failures yield ``None``."""
    timeout = settings.image_generation_timeout_seconds if timeout is None else timeout
    try:
        return await asyncio.wait_for(generate_image_data_uri(title), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Image generation for %r timed out after %.1fs", title, timeout)
    except Exception:
        logger.warning("Image generation for %r failed", title, exc_info=True)
    return None
