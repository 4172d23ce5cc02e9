"""Shared fakes for the media engine, blob store, preview store and logger."""

from __future__ import annotations

import asyncio

import pytest

from wavedeck.domain.playlist import PlaylistStore
from wavedeck.domain.track import Track


class RecordingLogger:
    def __init__(self):
        self.debugs = []
        self.infos = []
        self.warnings = []
        self.errors = []
        self.exceptions = []

    def debug(self, message, *args, **_kwargs):
        self.debugs.append(message % args if args else message)

    def info(self, message, *args, **_kwargs):
        self.infos.append(message % args if args else message)

    def warning(self, message, *args, **_kwargs):
        self.warnings.append(message % args if args else message)

    def error(self, message, *args, **_kwargs):
        self.errors.append(message % args if args else message)

    def exception(self, message, *args, **_kwargs):
        self.exceptions.append(message % args if args else message)


class FakeEngine:
    def __init__(self):
        self.calls = []
        self.volume = None
        self.play_error = None
        self._current_time = 0.0
        self._duration = 0.0

    def set_source(self, uri):
        self.calls.append(("set_source", uri))

    def load(self):
        self.calls.append(("load",))

    async def play(self):
        self.calls.append(("play",))
        if self.play_error is not None:
            raise self.play_error

    def pause(self):
        self.calls.append(("pause",))

    def set_volume(self, volume):
        self.volume = volume
        self.calls.append(("set_volume", volume))

    @property
    def current_time(self):
        return self._current_time

    @current_time.setter
    def current_time(self, value):
        self._current_time = value
        self.calls.append(("seek", value))

    @property
    def duration(self):
        return self._duration

    def names(self):
        return [call[0] for call in self.calls]


class FakeBlobStore:
    """Resolves uploads per MIME family; each family can fail or be held open."""

    def __init__(self):
        self.uploads = []
        self.failures = {}
        self.gates = {}
        self.finished = []
        self.uris = {}

    def hold(self, family):
        gate = asyncio.Event()
        self.gates[family] = gate
        return gate

    async def upload(self, data, mime_type, *, name=""):
        family = mime_type.split("/", 1)[0]
        self.uploads.append((name, mime_type, len(data)))
        gate = self.gates.get(family)
        if gate is not None:
            await gate.wait()
        self.finished.append(family)
        error = self.failures.get(family)
        if error is not None:
            raise error
        return self.uris.get(family, f"https://blobs.example/{family}/{name}")


class FakePreviewStore:
    def __init__(self):
        self.created = []
        self.released = []
        self._counter = 0

    def create(self, data, *, name=""):
        self._counter += 1
        uri = f"preview://{self._counter}/{name}"
        self.created.append(uri)
        return uri

    def release(self, uri):
        self.released.append(uri)
        return True

    @property
    def live(self):
        return [uri for uri in self.created if uri not in self.released]


def make_track(track_id, title=None, artist="Artist"):
    return Track(
        id=track_id,
        title=title or f"Song {track_id}",
        artist=artist,
        audio_src=f"https://cdn.example/{track_id}.mp3",
    )


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def preview_store():
    return FakePreviewStore()


@pytest.fixture
def playlist():
    return PlaylistStore([make_track(1), make_track(2), make_track(3)])


@pytest.fixture(name="make_track")
def make_track_fixture():
    return make_track
