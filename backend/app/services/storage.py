"""Local image storage for premium favorites — one file per (user, recipe)."""

import asyncio
import base64
import binascii
import logging
from pathlib import Path

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The image could not be decoded, fetched or written."""


class LocalImageStorage:
    """Writes images below ``media_root`` and returns their public URL."""

    def __init__(self, root: str | Path | None = None, url_prefix: str | None = None) -> None:
        self.root = Path(root or settings.media_root)
        self.url_prefix = (url_prefix or settings.media_url_prefix).rstrip("/")

    @staticmethod
    def recipe_image_key(user_id: str, recipe_id: str) -> str:
        """Storage key ``recipes/{user_id}/{recipe_id}.png``. Overwritten on regeneration."""
        return f"recipes/{user_id}/{recipe_id}.png"

    def _path_for(self, key: str) -> Path:
        if ".." in key or key.startswith("/"):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.root / key

    def public_url(self, key: str) -> str:
        return f"{settings.public_base_url.rstrip('/')}{self.url_prefix}/{key}"

    def put_bytes(self, key: str, data: bytes) -> str:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Saved %d bytes to %s", len(data), path)
        return self.public_url(key)

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            logger.info("Deleted %s", path)
            return True
        return False

    def is_stored_url(self, url: str) -> bool:
        return url.startswith(self.public_url(""))

    async def _load_source(self, image_src: str) -> bytes:
        if image_src.startswith("data:image"):
            header, _, payload = image_src.partition(";base64,")
            if not payload:
                raise StorageError("Malformed data URI")
            try:
                return base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as e:
                raise StorageError(f"Invalid base64 image ({header})") from e

        if image_src.startswith(("http://", "https://")):
            async with httpx.AsyncClient(timeout=20.0, follow_redirects=True) as client:
                try:
                    response = await client.get(image_src)
                    response.raise_for_status()
                except httpx.HTTPError as e:
                    raise StorageError(f"Failed to fetch external image: {e}") from e
            return response.content

        raise StorageError("Unsupported image source format")

    async def persist_recipe_image(self, user_id: str, recipe_id: str, image_src: str) -> str:
        """Store a ``data:`` URI or external URL and return the permanent URL."""
        data = await self._load_source(image_src)
        key = self.recipe_image_key(user_id, recipe_id)
        try:
            return await asyncio.to_thread(self.put_bytes, key, data)
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e


storage = LocalImageStorage()
