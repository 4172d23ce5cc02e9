"""Local preview files for cover art that has not been uploaded yet."""
from __future__ import annotations

import os
import uuid
from pathlib import Path

from .blob_store import extension_for


class PreviewStore:
    """Creates preview files and releases only the ones it created."""

    def __init__(self, preview_dir: str, logger) -> None:
        self.preview_dir_abs = os.path.abspath(preview_dir)
        self.logger = logger
        self._owned: dict[str, str] = {}
        os.makedirs(self.preview_dir_abs, exist_ok=True)

    @property
    def active_count(self) -> int:
        return len(self._owned)

    def create(self, data: bytes, *, name: str = "") -> str:
        path = os.path.join(self.preview_dir_abs, f"{uuid.uuid4().hex}{extension_for('', name)}")
        with open(path, "wb") as handle:
            handle.write(data)
        uri = Path(path).as_uri()
        self._owned[uri] = path
        self.logger.debug("Created cover preview %s", uri)
        return uri

    def release(self, uri: str) -> bool:
        path = self._owned.pop(uri, None)
        if path is None:
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            self.logger.exception("Failed to delete cover preview: %s", path)
            return False
        self.logger.debug("Released cover preview %s", uri)
        return True

    def release_all(self) -> int:
        released = 0
        for uri in list(self._owned):
            if self.release(uri):
                released += 1
        return released
