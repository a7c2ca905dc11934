"""Disk storage for uploaded calendar images.

Files are written flat into ``upload_dir`` as
``image-<epoch_ms>-<random>.<ext>`` and served back at
``<url_prefix>/<filename>``. Only the extension of the uploaded name is kept.
"""

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)

_MAX_EXTENSION_LEN = 10


@dataclass(frozen=True)
class StoredFile:
    filename: str
    url: str


def unique_filename(original: str, prefix: str = "image") -> str:
    """Collision-resistant file name carrying the original extension, if sane."""
    ext = PurePath(original).suffix.lower()
    if len(ext) > _MAX_EXTENSION_LEN or not ext[1:].isalnum():
        ext = ""
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


class LocalFileStorage:
    """Infrastructure adapter — the blob store behind image uploads."""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self._upload_dir = Path(upload_dir)
        self._url_prefix = url_prefix.rstrip("/")

    def url_for(self, filename: str) -> str:
        return f"{self._url_prefix}/{filename}"

    async def store_file(self, content: bytes, filename: str) -> StoredFile:
        """Write *content* under a fresh name and return where it is served."""
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        name = unique_filename(filename)
        path = self._upload_dir / name
        path.write_bytes(content)

        logger.info("Stored upload %s as %s (%d bytes)", filename, name, len(content))
        return StoredFile(filename=name, url=self.url_for(name))
