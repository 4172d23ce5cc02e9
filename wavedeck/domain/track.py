"""Track record and id generation."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import quote

DEFAULT_PLACEHOLDER_BASE = "https://picsum.photos/seed"


def placeholder_cover_url(title: str, base_url: str = DEFAULT_PLACEHOLDER_BASE) -> str:
    """Deterministic cover image URL keyed by the track title."""
    base = (base_url or DEFAULT_PLACEHOLDER_BASE).rstrip("/")
    return f"{base}/{quote(title or '', safe='')}/200"


@dataclass(frozen=True)
class Track:
    id: int
    title: str
    artist: str
    audio_src: str
    cover_art: str = ""
    description: Optional[str] = None
    release_date: Optional[str] = None
    genre: Optional[str] = None

    def __post_init__(self) -> None:
        if not str(self.title or "").strip():
            raise ValueError("Track title must not be blank.")
        if not str(self.artist or "").strip():
            raise ValueError("Track artist must not be blank.")
        if not str(self.audio_src or "").strip():
            raise ValueError("Track audio_src must not be blank.")
        if not self.cover_art:
            object.__setattr__(self, "cover_art", placeholder_cover_url(self.title))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Track":
        """Build a Track from a mapping, accepting camelCase seed keys."""
        aliases = {
            "audioSrc": "audio_src",
            "coverArt": "cover_art",
            "releaseDate": "release_date",
        }
        fields = {
            "id",
            "title",
            "artist",
            "audio_src",
            "cover_art",
            "description",
            "release_date",
            "genre",
        }
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in fields:
                normalized[name] = value
        normalized["id"] = int(normalized.get("id", 0))
        return cls(**normalized)


class TrackIdGenerator:
    """Millisecond timestamp ids that never repeat within one process."""

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0

    def next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate
