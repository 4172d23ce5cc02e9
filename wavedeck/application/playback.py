"""Playback state and orchestration of the media engine."""
from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..constants import DEFAULT_AD_INTERVAL, DEFAULT_VOLUME
from ..domain.errors import NotFoundError
from ..domain.events import EndedEvent, EngineEvent, ProgressEvent
from ..domain.playlist import PlaylistStore
from ..domain.track import Track
from ..utils import clamp
from .ad_gate import AdGate
from .ports import MediaEnginePort


class PlaybackStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class PlaybackState:
    current_track_id: Optional[int] = None
    is_playing: bool = False
    current_time: float = 0.0
    duration: float = 0.0
    volume: float = DEFAULT_VOLUME
    # True between a source change and the first engine progress event.
    awaiting_engine: bool = False

    @property
    def status(self) -> PlaybackStatus:
        if self.current_track_id is None:
            return PlaybackStatus.IDLE
        if not self.is_playing:
            return PlaybackStatus.PAUSED
        if self.awaiting_engine:
            return PlaybackStatus.LOADING
        return PlaybackStatus.PLAYING


@dataclass(frozen=True)
class PlaybackSnapshot:
    current_track: Optional[Track]
    status: PlaybackStatus
    is_playing: bool
    current_time: float
    duration: float
    volume: float
    played_count: int
    ad_visible: bool


@dataclass(frozen=True)
class PlaybackChange:
    """What a single operation changed; drives the engine hooks."""

    source: Optional[str] = None
    play_state_changed: bool = False
    volume_changed: bool = False
    seek_to: Optional[float] = None


PlaybackListener = Callable[[PlaybackSnapshot], None]
PlaybackHook = Callable[[PlaybackChange], Awaitable[None]]


class PlaybackController:
    """Owns PlaybackState and pushes user intent to the media engine.

    UI-driven operations update state and then run the hooks in a fixed order:
    source, play/pause, volume, seek, listeners. Engine-driven messages arrive
    through ``post`` and are handled one at a time in arrival order; they only
    update local state, except end-of-track which selects the next track.
    """

    def __init__(
        self,
        playlist: PlaylistStore,
        engine: MediaEnginePort,
        logger,
        *,
        ad_interval: int = DEFAULT_AD_INTERVAL,
        volume: float = DEFAULT_VOLUME,
    ) -> None:
        self.playlist = playlist
        self.engine = engine
        self.logger = logger
        self.state = PlaybackState(volume=clamp(volume, 0.0, 1.0))
        self.ad_gate = AdGate(self, logger, interval=ad_interval)
        self._listeners: list[PlaybackListener] = []
        # Bumped on every source change; events queued before it are stale.
        self._generation = 0
        self._inbox: asyncio.Queue[tuple[int, EngineEvent]] = asyncio.Queue()
        self._hooks: tuple[PlaybackHook, ...] = (
            self._push_source,
            self._push_play_state,
            self._push_volume,
            self._push_seek,
            self._push_listeners,
        )
        self.engine.set_volume(self.state.volume)

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    @property
    def current_track(self) -> Optional[Track]:
        if self.state.current_track_id is None:
            return None
        return self.playlist.get(self.state.current_track_id)

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            current_track=self.current_track,
            status=self.state.status,
            is_playing=self.state.is_playing,
            current_time=self.state.current_time,
            duration=self.state.duration,
            volume=self.state.volume,
            played_count=self.ad_gate.played_count,
            ad_visible=self.ad_gate.ad_visible,
        )

    def add_listener(self, listener: PlaybackListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: PlaybackListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- user intent ---

    async def select_track(self, track: Track) -> None:
        if self.state.current_track_id == track.id:
            await self.toggle_play()
            return
        await self._start_track(track)

    async def toggle_play(self) -> None:
        if self.state.current_track_id is None:
            first = self.playlist.first()
            if first is not None:
                await self.select_track(first)
            return
        self.state.is_playing = not self.state.is_playing
        await self._dispatch(PlaybackChange(play_state_changed=True))

    async def next_track(self) -> None:
        await self._change_track(1)

    async def previous_track(self) -> None:
        await self._change_track(-1)

    async def seek(self, fraction: float) -> None:
        fraction = clamp(fraction, 0.0, 1.0)
        if not self.state.duration:
            return
        target = fraction * self.state.duration
        self.state.current_time = target
        await self._dispatch(PlaybackChange(seek_to=target))

    async def set_volume(self, value: float) -> None:
        self.state.volume = clamp(value, 0.0, 1.0)
        await self._dispatch(PlaybackChange(volume_changed=True))

    async def dismiss_ad(self) -> None:
        await self.ad_gate.dismiss()

    # --- AdGate intent ---

    def hold_playback(self) -> None:
        # State only; the operation that triggered the gate dispatches afterwards.
        self.state.is_playing = False

    async def resume_playback(self) -> None:
        self.state.is_playing = True
        await self._dispatch(PlaybackChange(play_state_changed=True))

    # --- engine events ---

    def post(self, event: EngineEvent) -> None:
        self._inbox.put_nowait((self._generation, event))

    async def process_pending(self) -> int:
        """Handle every queued engine event; returns how many were handled."""
        handled = 0
        while not self._inbox.empty():
            generation, event = self._inbox.get_nowait()
            try:
                await self._handle_event(generation, event)
            except Exception:
                self.logger.exception("Failed to handle engine event: %r", event)
            finally:
                self._inbox.task_done()
            handled += 1
        return handled

    async def run_events(self) -> None:
        while True:
            generation, event = await self._inbox.get()
            try:
                await self._handle_event(generation, event)
            except Exception:
                self.logger.exception("Failed to handle engine event: %r", event)
            finally:
                self._inbox.task_done()

    def on_progress(self, current_time: float, duration: float) -> None:
        duration_value = _finite_or_zero(duration)
        time_value = _finite_or_zero(current_time)
        if duration_value:
            time_value = min(time_value, duration_value)
        self.state.duration = duration_value
        self.state.current_time = time_value
        self.state.awaiting_engine = False
        self._notify_listeners()

    async def on_ended(self) -> None:
        if not len(self.playlist):
            return
        current_id = self.state.current_track_id
        if current_id is None:
            return
        try:
            target = self.playlist.neighbor(current_id, 1)
        except NotFoundError:
            self.logger.warning("Ended track %s is no longer in the playlist", current_id)
            return
        # A single-track playlist restarts the same track instead of pausing it.
        await self._start_track(target)

    # --- internals ---

    async def _start_track(self, track: Track) -> None:
        self._generation += 1
        self.state.current_track_id = track.id
        self.state.is_playing = True
        self.state.current_time = 0.0
        self.state.duration = 0.0
        self.state.awaiting_engine = True
        self.logger.info("Now playing: %s - %s (id=%s)", track.artist, track.title, track.id)
        self.ad_gate.record_play()
        await self._dispatch(PlaybackChange(source=track.audio_src))

    async def _change_track(self, direction: int) -> None:
        current_id = self.state.current_track_id
        if current_id is None:
            return
        if self.playlist.find_index(current_id) is None:
            return
        await self.select_track(self.playlist.neighbor(current_id, direction))

    async def _handle_event(self, generation: int, event: EngineEvent) -> None:
        if self._is_stale(generation, event):
            self.logger.debug("Dropping stale engine event: %r", event)
            return
        if isinstance(event, ProgressEvent):
            self.on_progress(event.current_time, event.duration)
        elif isinstance(event, EndedEvent):
            await self.on_ended()
        else:
            self.logger.warning("Ignoring unknown engine event: %r", event)

    def _is_stale(self, generation: int, event: EngineEvent) -> bool:
        if generation != self._generation:
            return True
        source = getattr(event, "source", None)
        if source is None:
            return False
        track = self.current_track
        return track is None or track.audio_src != source

    async def _dispatch(self, change: PlaybackChange) -> None:
        for hook in self._hooks:
            await hook(change)

    async def _push_source(self, change: PlaybackChange) -> None:
        if change.source is None:
            return
        self.engine.set_source(change.source)
        self.engine.load()

    async def _push_play_state(self, change: PlaybackChange) -> None:
        if change.source is None and not change.play_state_changed:
            return
        if self.state.is_playing:
            try:
                await self.engine.play()
            except Exception:
                self.logger.exception("Error playing audio")
        else:
            self.engine.pause()

    async def _push_volume(self, change: PlaybackChange) -> None:
        if change.volume_changed:
            self.engine.set_volume(self.state.volume)

    async def _push_seek(self, change: PlaybackChange) -> None:
        if change.seek_to is not None:
            self.engine.current_time = change.seek_to

    async def _push_listeners(self, _change: PlaybackChange) -> None:
        self._notify_listeners()

    def _notify_listeners(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self.logger.exception("Playback listener failed")


def _finite_or_zero(value: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(parsed) or parsed < 0:
        return 0.0
    return parsed
