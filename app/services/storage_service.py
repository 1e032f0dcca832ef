"""Image storage for galleries, logos and section artwork.

Development writes under ``uploads/`` (served by the StaticFiles mount);
production writes to a Supabase Storage bucket over its REST API.
"""

import os
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import logger

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/svg+xml": "svg",
}

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class StorageError(RuntimeError):
    """The storage backend refused or failed an operation."""


def build_image_path(folder: str, filename: Optional[str], content_type: str, size: int) -> str:
    """Validate an image upload and return a unique storage path under ``folder``."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError(
            f"Unsupported file type: {content_type}",
            {"allowed": sorted(ALLOWED_IMAGE_TYPES)},
        )
    if size == 0:
        raise ValidationError("File is empty")
    if size > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise ValidationError(f"File exceeds the {settings.MAX_UPLOAD_MB} MB limit")

    parts = [p for p in (folder or "").split("/") if p and p not in (".", "..")]
    prefix = "/".join(parts) or "images"
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower() or ALLOWED_IMAGE_TYPES[content_type]
    return f"{prefix}/{uuid.uuid4().hex}.{ext}"


class ImageStore(ABC):
    """A place uploaded images live; paths are relative to the store root."""

    name: str = "abstract"

    @abstractmethod
    def public_url(self, path: str) -> str:
        ...

    @abstractmethod
    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store ``content`` at ``path`` and return its public URL."""
        ...

    @abstractmethod
    async def delete(self, path: str) -> None:
        ...


class LocalImageStore(ImageStore):
    name = "local"

    def __init__(self, root: Optional[str] = None):
        self.root = root or os.path.join(PROJECT_ROOT, "uploads")
        os.makedirs(self.root, exist_ok=True)

    def _full_path(self, path: str) -> str:
        return os.path.join(self.root, *path.split("/"))

    def public_url(self, path: str) -> str:
        return f"/uploads/{path}"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        target = self._full_path(path)
        os.makedirs(os.path.dirname(target), exist_ok=True)
        with open(target, "wb") as f:
            f.write(content)
        logger.info(f"Image written to {target}")
        return self.public_url(path)

    async def delete(self, path: str) -> None:
        target = self._full_path(path)
        if not os.path.exists(target):
            logger.warning(f"Nothing to delete at {target}")
            return
        os.remove(target)
        logger.info(f"Image removed from {target}")


class SupabaseImageStore(ImageStore):
    name = "supabase"

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None, bucket: Optional[str] = None):
        url = url or settings.SUPABASE_URL
        key = key or settings.SUPABASE_KEY
        if not url or not key:
            raise StorageError("SUPABASE_URL and SUPABASE_KEY are required in production")
        self.api = f"{url.rstrip('/')}/storage/v1"
        self.bucket = bucket or settings.SUPABASE_BUCKET
        self.auth: Dict[str, str] = {"apikey": key, "Authorization": f"Bearer {key}"}

    def public_url(self, path: str) -> str:
        return f"{self.api}/object/public/{self.bucket}/{path}"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        headers = {**self.auth, "Content-Type": content_type, "x-upsert": "true"}
        async with httpx.AsyncClient(timeout=60.0) as client:
            resp = await client.post(
                f"{self.api}/object/{self.bucket}/{path}", content=content, headers=headers
            )
        if resp.status_code not in (200, 201):
            logger.error(f"Bucket upload of {path} failed ({resp.status_code}): {resp.text}")
            raise StorageError(f"upload rejected with status {resp.status_code}")

        logger.info(f"Image uploaded to bucket {self.bucket}: {path}")
        return self.public_url(path)

    async def delete(self, path: str) -> None:
        async with httpx.AsyncClient(timeout=30.0) as client:
            resp = await client.request(
                "DELETE",
                f"{self.api}/object/{self.bucket}",
                headers={**self.auth, "Content-Type": "application/json"},
                json={"prefixes": [path]},
            )
        if resp.status_code not in (200, 201):
            logger.error(f"Bucket delete of {path} failed ({resp.status_code}): {resp.text}")
            raise StorageError(f"delete rejected with status {resp.status_code}")
        logger.info(f"Image deleted from bucket {self.bucket}: {path}")


def select_store() -> ImageStore:
    store = SupabaseImageStore() if settings.PRODUCTION else LocalImageStore()
    logger.info(f"Image storage backend: {store.name}")
    return store


storage_service = select_store()
