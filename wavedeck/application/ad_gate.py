"""Interstitial gate that pauses playback after every Kth track start."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..constants import DEFAULT_AD_INTERVAL


class PlaybackIntent(Protocol):
    @property
    def is_playing(self) -> bool: ...

    def hold_playback(self) -> None: ...

    async def resume_playback(self) -> None: ...


@dataclass
class AdGateState:
    played_count: int = 0
    ad_visible: bool = False
    was_playing_before_ad: bool = False


class AdGate:
    def __init__(self, intent: PlaybackIntent, logger, *, interval: int = DEFAULT_AD_INTERVAL) -> None:
        self.intent = intent
        self.logger = logger
        self.interval = max(1, int(interval))
        self.state = AdGateState()

    @property
    def played_count(self) -> int:
        return self.state.played_count

    @property
    def ad_visible(self) -> bool:
        return self.state.ad_visible

    def record_play(self) -> None:
        """Count one track start and raise the interstitial on every Kth."""
        self.state.played_count += 1
        count = self.state.played_count
        if count > 0 and count % self.interval == 0:
            self.state.was_playing_before_ad = bool(self.intent.is_playing)
            self.intent.hold_playback()
            self.state.ad_visible = True
            self.logger.info("Showing interstitial after %s track starts", count)

    async def dismiss(self) -> None:
        if not self.state.ad_visible:
            return
        self.state.ad_visible = False
        resume = self.state.was_playing_before_ad
        self.state.was_playing_before_ad = False
        self.logger.debug("Interstitial dismissed (resume=%s)", resume)
        if resume:
            await self.intent.resume_playback()
