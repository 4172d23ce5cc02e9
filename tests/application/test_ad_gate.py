import pytest

from wavedeck.application.ad_gate import AdGate
from wavedeck.application.playback import PlaybackController
from wavedeck.domain.playlist import PlaylistStore


class _Intent:
    def __init__(self, playing=True):
        self.is_playing = playing
        self.holds = 0
        self.resumes = 0

    def hold_playback(self):
        self.holds += 1
        self.is_playing = False

    async def resume_playback(self):
        self.resumes += 1
        self.is_playing = True


def test_gate_shows_on_every_kth_play(logger):
    intent = _Intent()
    gate = AdGate(intent, logger, interval=20)

    for _ in range(19):
        gate.record_play()
    assert gate.ad_visible is False
    assert intent.holds == 0

    gate.record_play()
    assert gate.ad_visible is True
    assert gate.played_count == 20
    assert intent.holds == 1
    assert logger.infos == ["Showing interstitial after 20 track starts"]


def test_interval_is_at_least_one(logger):
    gate = AdGate(_Intent(), logger, interval=0)

    gate.record_play()

    assert gate.interval == 1
    assert gate.ad_visible is True


@pytest.mark.asyncio
async def test_dismiss_resumes_only_when_previously_playing(logger):
    intent = _Intent(playing=False)
    gate = AdGate(intent, logger, interval=1)

    gate.record_play()
    await gate.dismiss()

    assert gate.ad_visible is False
    assert intent.resumes == 0

    intent.is_playing = True
    gate.record_play()
    await gate.dismiss()

    assert intent.resumes == 1


@pytest.mark.asyncio
async def test_dismiss_is_idempotent(logger):
    intent = _Intent()
    gate = AdGate(intent, logger, interval=1)
    gate.record_play()

    await gate.dismiss()
    await gate.dismiss()

    assert intent.resumes == 1
    assert gate.ad_visible is False


@pytest.mark.asyncio
async def test_controller_pauses_on_kth_start_and_resumes_on_dismiss(playlist, engine, logger):
    controller = PlaybackController(playlist, engine, logger, ad_interval=2)
    await controller.select_track(playlist.get(1))
    engine.calls.clear()

    await controller.next_track()

    snapshot = controller.snapshot()
    assert snapshot.ad_visible is True
    assert snapshot.is_playing is False
    assert controller.state.current_track_id == 2
    assert engine.names() == ["set_source", "load", "pause"]

    engine.calls.clear()
    await controller.dismiss_ad()

    assert controller.is_playing is True
    assert controller.snapshot().ad_visible is False
    assert engine.names() == ["play"]


@pytest.mark.asyncio
async def test_gate_on_first_start_holds_then_resumes(make_track, engine, logger):
    controller = PlaybackController(PlaylistStore([make_track(1)]), engine, logger, ad_interval=1)

    await controller.toggle_play()

    assert controller.snapshot().ad_visible is True
    assert controller.is_playing is False
    assert engine.names()[-1] == "pause"

    await controller.dismiss_ad()
    await controller.dismiss_ad()

    assert controller.is_playing is True
    assert engine.names().count("play") == 1
