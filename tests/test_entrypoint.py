import asyncio
from types import SimpleNamespace

import pytest

import app
from wavedeck import main as app_main
from wavedeck.application import bootstrap


def _config(tmp_path):
    return SimpleNamespace(
        blob_dir=str(tmp_path / "uploads"),
        preview_dir=str(tmp_path / ".previews"),
        ad_interval=20,
        max_audio_bytes=15 * 1024 * 1024,
        max_cover_bytes=5 * 1024 * 1024,
        default_volume=0.75,
        placeholder_cover_base="https://picsum.photos/seed",
        description_enabled=False,
        lm_base_url="",
        lm_api_key="",
        lm_model="",
        lm_timeout_seconds=60,
        lm_temperature=0.8,
        lm_max_tokens=120,
    )


@pytest.fixture
def services(tmp_path, logger, engine, blob_store, preview_store, playlist):
    built = bootstrap.initialize_app_services(
        config=_config(tmp_path),
        logger=logger,
        media_engine=engine,
        blob_store=blob_store,
        preview_store=preview_store,
        seed_tracks=playlist.tracks,
    )

    async def _no_events():
        return None

    built.playback.run_events = _no_events
    return built


def test_arg_parser_defaults():
    args = app.build_arg_parser().parse_args([])

    assert args.audio is None
    assert args.ad_seconds == 5.0
    assert args.no_autoplay is False
    assert args.describe is False


@pytest.mark.asyncio
async def test_ingest_from_args_adds_file_with_overrides(tmp_path, services, logger):
    audio = tmp_path / "M83 - Midnight City.mp3"
    audio.write_bytes(b"audio")
    args = app.build_arg_parser().parse_args([str(audio), "--title", "Midnight City (Live)", "--genre", "Synth"])

    track = await app.ingest_from_args(services, args, logger)

    assert track.title == "Midnight City (Live)"
    assert track.artist == "M83"
    assert track.genre == "Synth"
    assert services.playlist.tracks[-1] is track
    assert services.playback.current_track is track


@pytest.mark.asyncio
async def test_ingest_from_args_reports_missing_file(tmp_path, services, logger):
    args = app.build_arg_parser().parse_args([str(tmp_path / "missing.mp3")])

    assert await app.ingest_from_args(services, args, logger) is None
    assert logger.errors and "Cannot add" in logger.errors[0]
    assert len(services.playlist) == 3


@pytest.mark.asyncio
async def test_ingest_from_args_reports_upload_failure(tmp_path, services, logger, blob_store):
    blob_store.failures["audio"] = RuntimeError("disk full")
    audio = tmp_path / "Grimes - Genesis.mp3"
    audio.write_bytes(b"audio")
    args = app.build_arg_parser().parse_args([str(audio)])

    assert await app.ingest_from_args(services, args, logger) is None
    assert any("Cannot add" in message for message in logger.errors)


@pytest.mark.asyncio
async def test_run_session_autoplays_first_track(services, logger, engine):
    args = app.build_arg_parser().parse_args([])

    await app.run_session(services, args, logger)

    assert services.playback.state.current_track_id == 1
    assert engine.calls[-1] == ("play",)
    assert any(message.startswith("[loading] Artist - Song 1") for message in logger.infos)


@pytest.mark.asyncio
async def test_run_session_without_autoplay_stays_idle(services, logger, engine):
    args = app.build_arg_parser().parse_args(["--no-autoplay"])

    await app.run_session(services, args, logger)

    assert services.playback.state.current_track_id is None


@pytest.mark.asyncio
async def test_run_session_dismisses_interstitial(tmp_path, logger, engine, blob_store, preview_store, make_track):
    built = bootstrap.initialize_app_services(
        config=SimpleNamespace(**{**vars(_config(tmp_path)), "ad_interval": 1}),
        logger=logger,
        media_engine=engine,
        blob_store=blob_store,
        preview_store=preview_store,
        seed_tracks=[make_track(1)],
    )

    async def _wait_for_dismiss():
        while built.playback.snapshot().ad_visible:
            await asyncio.sleep(0.01)

    built.playback.run_events = _wait_for_dismiss
    args = app.build_arg_parser().parse_args(["--ad-seconds", "0"])

    await app.run_session(built, args, logger)

    assert built.playback.snapshot().ad_visible is False
    assert built.playback.is_playing is True
    assert any("Advertisement break" in message for message in logger.infos)


def test_launch_runs_session_and_releases(monkeypatch, tmp_path, logger, engine):
    released = []
    engine.release = lambda: released.append(True)
    seen = {}

    monkeypatch.setattr(app, "load_config", lambda: _config(tmp_path))
    monkeypatch.setattr(app, "setup_logging", lambda _config: logger)

    def fake_initialize(*, config, logger):
        built = bootstrap.initialize_app_services(
            config=config,
            logger=logger,
            media_engine=engine,
            seed_tracks=(),
        )
        seen["services"] = built
        return built

    def fake_run(coro):
        seen["coro"] = coro
        coro.close()
        raise KeyboardInterrupt

    monkeypatch.setattr(app, "initialize_app_services", fake_initialize)
    monkeypatch.setattr(app.asyncio, "run", fake_run)

    assert app.launch(["--no-autoplay"]) == 0
    assert released == [True]
    assert "Session stopped" in logger.infos


def test_main_delegates_to_launch(monkeypatch):
    monkeypatch.setattr(app, "launch", lambda: 0)

    with pytest.raises(SystemExit) as excinfo:
        app_main.main()

    assert excinfo.value.code == 0
