"""Ordered, append-only playlist container."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .errors import DuplicateIdError, NotFoundError
from .track import Track


class PlaylistStore:
    """Owns the ordered sequence of tracks.

    Insertion order defines navigation order. The only mutation is
    ``append``; lookups are linear, which is fine for hand-curated playlists.
    """

    def __init__(self, tracks: Iterable[Track] = ()) -> None:
        self._tracks: list[Track] = []
        for track in tracks:
            self.append(track)

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(tuple(self._tracks))

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    def append(self, track: Track) -> None:
        if self.find_index(track.id) is not None:
            raise DuplicateIdError(f"Track id already in playlist: {track.id}")
        self._tracks.append(track)

    def find_index(self, track_id: int) -> Optional[int]:
        for index, track in enumerate(self._tracks):
            if track.id == track_id:
                return index
        return None

    def get(self, track_id: int) -> Optional[Track]:
        index = self.find_index(track_id)
        if index is None:
            return None
        return self._tracks[index]

    def first(self) -> Optional[Track]:
        return self._tracks[0] if self._tracks else None

    def neighbor(self, track_id: int, direction: int) -> Track:
        """Track ``direction`` steps away from ``track_id``, wrapping both ways."""
        if not self._tracks:
            raise NotFoundError("Playlist is empty.")
        index = self.find_index(track_id)
        if index is None:
            raise NotFoundError(f"Track id not in playlist: {track_id}")
        return self._tracks[(index + direction) % len(self._tracks)]
