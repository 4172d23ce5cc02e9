"""Domain records, errors and pure helpers."""

from .errors import (
    DuplicateIdError,
    EngineError,
    NotFoundError,
    UploadError,
    ValidationError,
    WavedeckError,
)
from .events import EndedEvent, EngineEvent, ProgressEvent
from .filenames import derive_title_artist, strip_extension
from .formatting import format_time
from .media import CandidateFile, guess_mime_type, is_audio_type, is_image_type
from .playlist import PlaylistStore
from .track import Track, TrackIdGenerator, placeholder_cover_url

__all__ = [
    "CandidateFile",
    "DuplicateIdError",
    "EndedEvent",
    "EngineError",
    "EngineEvent",
    "NotFoundError",
    "PlaylistStore",
    "ProgressEvent",
    "Track",
    "TrackIdGenerator",
    "UploadError",
    "ValidationError",
    "WavedeckError",
    "derive_title_artist",
    "format_time",
    "guess_mime_type",
    "is_audio_type",
    "is_image_type",
    "placeholder_cover_url",
    "strip_extension",
]
