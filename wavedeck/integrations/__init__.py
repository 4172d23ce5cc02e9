"""Integrations for external services and libraries."""

from .lm_studio import (
    DescriptionRequest,
    LmStudioDescriptionGenerator,
    LmStudioError,
    generate_track_description,
)
from .vlc_engine import VlcMediaEngine

__all__ = [
    "DescriptionRequest",
    "LmStudioDescriptionGenerator",
    "LmStudioError",
    "VlcMediaEngine",
    "generate_track_description",
]
