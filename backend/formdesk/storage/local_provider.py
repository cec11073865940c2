"""
Local filesystem storage provider.
Files are written under a base directory that the app serves as static files.
"""
import shutil
from pathlib import Path
from typing import BinaryIO, Optional
from urllib.parse import quote

import structlog

from .provider import StorageProvider

logger = structlog.get_logger(__name__)

MOUNT_PATH = "/files"


class LocalStorageProvider(StorageProvider):
    """Stores objects as files; public URLs point at the static mount."""

    def __init__(self, base_dir: str, public_base_url: str):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _get_path(self, key: str) -> Path:
        # Remove leading slash and sanitize
        clean_key = key.lstrip("/").replace("..", "").replace("\\", "/")
        return self.base_dir / clean_key

    def save(self, key: str, stream: BinaryIO) -> None:
        path = self._get_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            shutil.copyfileobj(stream, f)
        logger.info("object_stored", key=key)

    def get_url(self, key: str) -> Optional[str]:
        if not self._get_path(key).exists():
            return None
        return f"{self.public_base_url}{MOUNT_PATH}/{quote(key.lstrip('/'))}"
