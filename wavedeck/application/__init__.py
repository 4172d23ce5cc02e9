"""Application layer orchestration."""

from .ad_gate import AdGate, AdGateState
from .bootstrap import AppServices, build_description_generator, initialize_app_services
from .ingest import IngestPipeline, PendingUpload, TrackForm, error_message
from .playback import (
    PlaybackController,
    PlaybackSnapshot,
    PlaybackState,
    PlaybackStatus,
)
from .ports import BlobStorePort, DescriptionGeneratorPort, MediaEnginePort, PreviewStorePort
from .ui_hooks import UiHooks

__all__ = [
    "AdGate",
    "AdGateState",
    "AppServices",
    "BlobStorePort",
    "DescriptionGeneratorPort",
    "IngestPipeline",
    "MediaEnginePort",
    "PendingUpload",
    "PlaybackController",
    "PlaybackSnapshot",
    "PlaybackState",
    "PlaybackStatus",
    "PreviewStorePort",
    "TrackForm",
    "UiHooks",
    "build_description_generator",
    "error_message",
    "initialize_app_services",
]
