"""Object storage for uploaded files."""

import os
import secrets
import time
from functools import lru_cache

from formdesk.config import get_settings
from formdesk.storage.local_provider import LocalStorageProvider, MOUNT_PATH
from formdesk.storage.provider import StorageProvider


@lru_cache()
def get_storage() -> StorageProvider:
    settings = get_settings()
    return LocalStorageProvider(settings.upload_dir, settings.public_base_url)


def _extension(filename: str) -> str:
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    return ext or "bin"


def upload_key(filename: str) -> str:
    """Key for a form upload: uploads/<millis>-<random>.<ext>."""
    return f"uploads/{int(time.time() * 1000)}-{secrets.token_hex(4)}.{_extension(filename)}"


def avatar_key(user_id: int, filename: str) -> str:
    return f"avatars/{user_id}/avatar.{_extension(filename)}"


__all__ = [
    "StorageProvider",
    "LocalStorageProvider",
    "MOUNT_PATH",
    "get_storage",
    "upload_key",
    "avatar_key",
]
