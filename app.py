"""Command-line entrypoint for a wavedeck playback session."""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from wavedeck.application.bootstrap import AppServices, initialize_app_services
from wavedeck.application.ingest import TrackForm
from wavedeck.application.playback import PlaybackSnapshot
from wavedeck.config import load_config
from wavedeck.domain.errors import UploadError, ValidationError
from wavedeck.domain.formatting import format_time
from wavedeck.domain.media import CandidateFile
from wavedeck.domain.track import Track
from wavedeck.logging_config import setup_logging


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavedeck",
        description="Play the session playlist and optionally add a track to it.",
    )
    parser.add_argument("audio", nargs="?", help="Audio file to upload and play.")
    parser.add_argument("--cover", help="Cover image for the uploaded track.")
    parser.add_argument("--title", help="Track title (defaults to the file name).")
    parser.add_argument("--artist", help="Track artist (defaults to the file name).")
    parser.add_argument("--genre", default="")
    parser.add_argument("--release-date", default="")
    parser.add_argument(
        "--describe",
        action="store_true",
        help="Ask LM Studio for a short description before uploading.",
    )
    parser.add_argument(
        "--ad-seconds",
        type=float,
        default=5.0,
        help="How long the interstitial stays up before it is dismissed.",
    )
    parser.add_argument(
        "--no-autoplay",
        action="store_true",
        help="Do not start the first playlist entry when no file is given.",
    )
    return parser


async def ingest_from_args(services: AppServices, args: argparse.Namespace, logger) -> Optional[Track]:
    ingest = services.ingest
    try:
        ingest.validate_audio(CandidateFile.from_path(args.audio))
        if args.cover:
            ingest.validate_cover(CandidateFile.from_path(args.cover))
    except (ValidationError, FileNotFoundError) as exc:
        logger.error("Cannot add %s: %s", args.audio, exc)
        ingest.reset()
        return None

    ingest.update_form(title=args.title, artist=args.artist)
    if args.describe:
        await ingest.generate_description()
    form = TrackForm(release_date=args.release_date or None, genre=args.genre or None)
    try:
        return await ingest.commit(form)
    except (ValidationError, UploadError) as exc:
        logger.error("Cannot add %s: %s", args.audio, exc)
        return None


async def run_session(services: AppServices, args: argparse.Namespace, logger) -> None:
    playback = services.playback
    attach = getattr(services.media_engine, "attach", None)
    if callable(attach):
        attach(playback.post)

    pending_dismiss: list[asyncio.Task] = []
    last_status: list[object] = [None]

    def _on_change(snapshot: PlaybackSnapshot) -> None:
        key = (snapshot.current_track.id if snapshot.current_track else None, snapshot.status)
        if key != last_status[0]:
            last_status[0] = key
            track = snapshot.current_track
            logger.info(
                "[%s] %s %s/%s",
                snapshot.status.value,
                f"{track.artist} - {track.title}" if track else "-",
                format_time(snapshot.current_time),
                format_time(snapshot.duration),
            )
        if snapshot.ad_visible and not pending_dismiss:
            logger.info("Advertisement break (%.0fs)", args.ad_seconds)
            pending_dismiss.append(asyncio.create_task(_dismiss_later()))

    async def _dismiss_later() -> None:
        try:
            await asyncio.sleep(max(0.0, args.ad_seconds))
            await playback.dismiss_ad()
        finally:
            pending_dismiss.clear()

    playback.add_listener(_on_change)
    if args.audio:
        track = await ingest_from_args(services, args, logger)
        if track is None and not args.no_autoplay:
            await playback.toggle_play()
    elif not args.no_autoplay:
        await playback.toggle_play()
    await playback.run_events()


def launch(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = load_config()
    logger = setup_logging(config)
    services = initialize_app_services(config=config, logger=logger)
    try:
        asyncio.run(run_session(services, args, logger))
    except KeyboardInterrupt:
        logger.info("Session stopped")
    finally:
        services.ingest.reset()
        release = getattr(services.media_engine, "release", None)
        if callable(release):
            release()
    return 0


if __name__ == "__main__":
    raise SystemExit(launch())
