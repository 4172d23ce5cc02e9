"""Inbound messages emitted by the media engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class ProgressEvent:
    current_time: float
    duration: float
    # URI the engine was playing when the event was raised; None when unknown.
    source: Optional[str] = None


@dataclass(frozen=True)
class EndedEvent:
    source: Optional[str] = None


EngineEvent = Union[ProgressEvent, EndedEvent]
