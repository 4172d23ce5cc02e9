"""Application-level ports for the media engine, blob store and description flows."""

from __future__ import annotations

from typing import Protocol


class MediaEnginePort(Protocol):
    """Port abstraction for the audio rendering engine."""

    current_time: float

    @property
    def duration(self) -> float: ...

    def set_source(self, uri: str) -> None: ...

    def load(self) -> None: ...

    async def play(self) -> None: ...

    def pause(self) -> None: ...

    def set_volume(self, volume: float) -> None: ...


class BlobStorePort(Protocol):
    """Port abstraction for byte uploads that return a public URI."""

    async def upload(self, data: bytes, mime_type: str, *, name: str = "") -> str: ...


class DescriptionGeneratorPort(Protocol):
    """Port abstraction for short AI-written track descriptions."""

    async def generate(self, title: str, artist: str) -> str: ...


class PreviewStorePort(Protocol):
    """Port abstraction for locally held cover previews."""

    def create(self, data: bytes, *, name: str = "") -> str: ...

    def release(self, uri: str) -> bool: ...
