"""libVLC media engine used by the playback controller."""

from __future__ import annotations

import asyncio
import sys
from typing import Callable

from ..domain.errors import EngineError
from ..domain.events import EndedEvent, EngineEvent, ProgressEvent
from ..utils import clamp

try:
    import vlc as _vlc
except Exception:  # pragma: no cover - dependency optional at import time
    _vlc = None

EventSink = Callable[[EngineEvent], None]


class VlcMediaEngine:
    """Thin libVLC wrapper for audio-only playback of URIs.

    libVLC raises its events on its own threads; ``attach`` marshals them onto
    the asyncio loop before they reach the sink.
    """

    def __init__(self, *, vlc_module=None, platform_name: str | None = None, logger=None) -> None:
        self._vlc = vlc_module if vlc_module is not None else _vlc
        if self._vlc is None:
            raise RuntimeError("python-vlc is not available")
        platform_value = platform_name if platform_name is not None else sys.platform
        args = ["--no-xlib", "--no-video"] if str(platform_value).startswith("linux") else ["--no-video"]
        self.instance = self._vlc.Instance(args)
        self.player = self.instance.media_player_new()
        self.media = None
        self.source: str | None = None
        self.logger = logger
        self._sink: EventSink | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._attached: list[tuple[object, Callable]] = []

    def set_source(self, uri: str) -> None:
        self.source = uri

    def load(self) -> None:
        if not self.source:
            raise EngineError("No source set.")
        self._release_media()
        media = self.instance.media_new(self.source)
        self.player.set_media(media)
        self.media = media

    async def play(self) -> None:
        rc = int(self.player.play())
        if rc == -1:
            raise EngineError("VLC failed to start playback.")

    def pause(self) -> None:
        self.player.set_pause(1)

    def set_volume(self, volume: float) -> None:
        self.player.audio_set_volume(int(round(clamp(volume, 0.0, 1.0) * 100)))

    @property
    def current_time(self) -> float:
        return max(0, int(self.player.get_time() or 0)) / 1000.0

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        self.player.set_time(int(max(0.0, float(seconds)) * 1000))

    @property
    def duration(self) -> float:
        return max(0, int(self.player.get_length() or 0)) / 1000.0

    def attach(self, sink: EventSink, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self.detach()
        self._sink = sink
        self._loop = loop or asyncio.get_running_loop()
        manager = self.player.event_manager()
        event_type = self._vlc.EventType
        for kind, callback in (
            (event_type.MediaPlayerTimeChanged, self._on_time_changed),
            (event_type.MediaPlayerEndReached, self._on_end_reached),
        ):
            manager.event_attach(kind, callback)
            self._attached.append((kind, callback))

    def detach(self) -> None:
        if self._attached:
            manager = self.player.event_manager()
            for kind, _callback in self._attached:
                try:
                    manager.event_detach(kind)
                except Exception:
                    if self.logger is not None:
                        self.logger.exception("Failed to detach VLC event %s", kind)
        self._attached = []
        self._sink = None
        self._loop = None

    # libVLC callbacks run on its own threads and only read the event payload;
    # player queries happen in the loop-side delivery methods.
    def _on_time_changed(self, event) -> None:
        time_ms = getattr(getattr(event, "u", None), "new_time", 0)
        self._schedule(self._deliver_progress, time_ms, self.source)

    def _on_end_reached(self, _event) -> None:
        self._schedule(self._deliver, EndedEvent(source=self.source))

    def _schedule(self, callback: Callable, *args) -> None:
        loop = self._loop
        if self._sink is None or loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(callback, *args)

    def _deliver_progress(self, time_ms: int, source: str | None) -> None:
        seconds = max(0, int(time_ms or 0)) / 1000.0
        self._deliver(ProgressEvent(current_time=seconds, duration=self.duration, source=source))

    def _deliver(self, event: EngineEvent) -> None:
        sink = self._sink
        if sink is not None:
            sink(event)

    def _release_media(self) -> None:
        if self.media is not None:
            try:
                self.media.release()
            except Exception:
                pass
            self.media = None

    def release(self) -> None:
        self.detach()
        try:
            self.player.stop()
        except Exception:
            pass
        self._release_media()
        try:
            self.player.release()
        except Exception:
            pass
        try:
            self.instance.release()
        except Exception:
            pass
