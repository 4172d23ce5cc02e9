"""Candidate files selected by the user for ingestion."""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_EXTRA_MIME_TYPES = {
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".opus": "audio/ogg",
    ".webp": "image/webp",
}


def guess_mime_type(name: str) -> str:
    """Guess MIME type from the file name; empty string when unknown."""
    ext = os.path.splitext(name or "")[1].lower()
    if ext in _EXTRA_MIME_TYPES:
        return _EXTRA_MIME_TYPES[ext]
    mime_type, _ = mimetypes.guess_type(name or "")
    return mime_type or ""


def is_audio_type(mime_type: str) -> bool:
    return str(mime_type or "").strip().lower().startswith("audio/")


def is_image_type(mime_type: str) -> bool:
    return str(mime_type or "").strip().lower().startswith("image/")


@dataclass(frozen=True)
class CandidateFile:
    name: str
    size: int
    mime_type: str
    path: Optional[Path] = None
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: str | os.PathLike[str], mime_type: str | None = None) -> "CandidateFile":
        file_path = Path(path).expanduser()
        if not file_path.is_file():
            raise FileNotFoundError(str(file_path))
        return cls(
            name=file_path.name,
            size=file_path.stat().st_size,
            mime_type=mime_type if mime_type is not None else guess_mime_type(file_path.name),
            path=file_path.resolve(),
        )

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: str | None = None) -> "CandidateFile":
        return cls(
            name=name,
            size=len(data),
            mime_type=mime_type if mime_type is not None else guess_mime_type(name),
            data=bytes(data),
        )

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise FileNotFoundError(self.name)
        return self.path.read_bytes()
