"""Application bootstrap assembly for playback, ingest and storage services."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..config import AppConfig
from ..constants import SEED_TRACKS
from ..domain.playlist import PlaylistStore
from ..domain.track import Track
from ..integrations.lm_studio import LmStudioDescriptionGenerator
from ..integrations.vlc_engine import VlcMediaEngine
from ..storage.blob_store import LocalBlobStore
from ..storage.preview_store import PreviewStore
from .ingest import IngestPipeline
from .playback import PlaybackController
from .ports import BlobStorePort, DescriptionGeneratorPort, MediaEnginePort, PreviewStorePort
from .ui_hooks import UiHooks


@dataclass(frozen=True)
class AppServices:
    playlist: PlaylistStore
    playback: PlaybackController
    ingest: IngestPipeline
    media_engine: MediaEnginePort
    blob_store: BlobStorePort
    preview_store: PreviewStorePort
    description_generator: DescriptionGeneratorPort | None


def build_description_generator(config: AppConfig, logger) -> LmStudioDescriptionGenerator | None:
    """Create the description generator when LM Studio settings are configured."""
    if config.description_enabled and config.lm_model:
        return LmStudioDescriptionGenerator(
            base_url=config.lm_base_url,
            api_key=config.lm_api_key,
            model=config.lm_model,
            timeout_seconds=config.lm_timeout_seconds,
            temperature=config.lm_temperature,
            max_tokens=config.lm_max_tokens,
            logger=logger,
        )

    if config.description_enabled:
        logger.warning(
            "Descriptions are enabled but LM_STUDIO_MODEL is empty; AI descriptions are disabled."
        )
    return None


def build_playlist(seed: Iterable[Mapping[str, Any] | Track]) -> PlaylistStore:
    return PlaylistStore(
        item if isinstance(item, Track) else Track.from_dict(item) for item in seed
    )


def initialize_app_services(
    *,
    config: AppConfig,
    logger,
    media_engine: MediaEnginePort | None = None,
    blob_store: BlobStorePort | None = None,
    preview_store: PreviewStorePort | None = None,
    description_generator: DescriptionGeneratorPort | None = None,
    seed_tracks: Iterable[Mapping[str, Any] | Track] = SEED_TRACKS,
    ui_hooks: UiHooks | None = None,
) -> AppServices:
    """Construct all runtime services and return a typed service bundle."""
    playlist = build_playlist(seed_tracks)
    logger.info("Playlist seeded with %s tracks", len(playlist))

    if media_engine is None:
        media_engine = VlcMediaEngine(logger=logger)
    if blob_store is None:
        blob_store = LocalBlobStore(config.blob_dir, logger)
    if preview_store is None:
        preview_store = PreviewStore(config.preview_dir, logger)
    if description_generator is None:
        description_generator = build_description_generator(config, logger)

    playback = PlaybackController(
        playlist,
        media_engine,
        logger,
        ad_interval=config.ad_interval,
        volume=config.default_volume,
    )
    ingest = IngestPipeline(
        playlist,
        blob_store,
        preview_store,
        logger,
        description_generator=description_generator,
        max_audio_bytes=config.max_audio_bytes,
        max_cover_bytes=config.max_cover_bytes,
        placeholder_base=config.placeholder_cover_base,
        ui_hooks=ui_hooks or UiHooks.from_logger(logger),
        on_track_added=playback.select_track,
    )

    return AppServices(
        playlist=playlist,
        playback=playback,
        ingest=ingest,
        media_engine=media_engine,
        blob_store=blob_store,
        preview_store=preview_store,
        description_generator=description_generator,
    )
