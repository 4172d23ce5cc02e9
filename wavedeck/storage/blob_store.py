"""Filesystem-backed blob store for uploaded audio and cover art."""
from __future__ import annotations

import asyncio
import mimetypes
import os
import re
import uuid
from datetime import datetime
from pathlib import Path

_PREFERRED_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/flac": ".flac",
    "audio/ogg": ".ogg",
    "audio/mp4": ".m4a",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


class BlobStoreError(RuntimeError):
    """Raised when a blob cannot be written."""


def extension_for(mime_type: str, name: str = "") -> str:
    ext = os.path.splitext(name or "")[1].lower()
    if re.fullmatch(r"\.[a-z0-9]{1,8}", ext):
        return ext
    normalized = (mime_type or "").strip().lower()
    if normalized in _PREFERRED_EXTENSIONS:
        return _PREFERRED_EXTENSIONS[normalized]
    return mimetypes.guess_extension(normalized) or ".bin"


class LocalBlobStore:
    def __init__(self, root_dir: str, logger) -> None:
        self.root_dir = root_dir
        self.root_dir_abs = os.path.abspath(root_dir)
        self.logger = logger
        os.makedirs(self.root_dir_abs, exist_ok=True)
        self.logger.info("Blob dir: %s", self.root_dir_abs)

    def _dated_dir(self) -> str:
        date_dir = os.path.join(self.root_dir_abs, datetime.now().strftime("%Y-%m-%d"))
        os.makedirs(date_dir, exist_ok=True)
        return date_dir

    def write(self, data: bytes, mime_type: str, *, name: str = "") -> str:
        path = os.path.join(self._dated_dir(), f"{uuid.uuid4().hex}{extension_for(mime_type, name)}")
        try:
            with open(path, "wb") as handle:
                handle.write(data)
        except OSError as exc:
            raise BlobStoreError(f"Failed to store {name or 'blob'}: {exc}") from exc
        uri = Path(path).as_uri()
        self.logger.info("Stored %s (%s bytes, %s) at %s", name or "blob", len(data), mime_type, uri)
        return uri

    async def upload(self, data: bytes, mime_type: str, *, name: str = "") -> str:
        return await asyncio.to_thread(self.write, data, mime_type, name=name)
