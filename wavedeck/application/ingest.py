"""Validation, concurrent upload and commit of user-supplied tracks."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..constants import MAX_AUDIO_BYTES, MAX_COVER_BYTES
from ..domain.errors import UploadError, ValidationError
from ..domain.filenames import DerivedMetadata, derive_title_artist
from ..domain.media import CandidateFile, is_audio_type, is_image_type
from ..domain.playlist import PlaylistStore
from ..domain.track import DEFAULT_PLACEHOLDER_BASE, Track, TrackIdGenerator, placeholder_cover_url
from .ports import BlobStorePort, DescriptionGeneratorPort, PreviewStorePort
from .ui_hooks import UiHooks

UPLOAD_FAILED_MESSAGE = "Something went wrong during the upload. Please try again."
DESCRIPTION_FAILED_MESSAGE = "Could not generate description. Please try again later."
DESCRIPTION_DISABLED_MESSAGE = "AI descriptions are not configured."

TrackAddedCallback = Callable[[Track], Awaitable[None]]


def _megabytes(value: int) -> str:
    return f"{value / (1024 * 1024):g}MB"


def error_message(
    error: Exception,
    *,
    max_audio_bytes: int = MAX_AUDIO_BYTES,
    max_cover_bytes: int = MAX_COVER_BYTES,
) -> str:
    """User-facing text for ingest failures."""
    if isinstance(error, UploadError):
        return UPLOAD_FAILED_MESSAGE
    if not isinstance(error, ValidationError):
        return str(error)
    if error.reason == "missing_fields":
        return "Please fill in title, artist, and select an audio file."
    if error.field == "cover":
        if error.reason == "too_large":
            return f"Image is too large. Maximum size is {_megabytes(max_cover_bytes)}."
        return "Please select a valid image file."
    if error.reason == "too_large":
        return f"File is too large. Maximum size is {_megabytes(max_audio_bytes)}."
    return "Please select or drop a valid audio file."


@dataclass(frozen=True)
class TrackForm:
    """Form values submitted with a commit; ``None`` keeps the pending value."""

    title: Optional[str] = None
    artist: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[str] = None
    genre: Optional[str] = None


@dataclass
class PendingUpload:
    audio_file: Optional[CandidateFile] = None
    cover_file: Optional[CandidateFile] = None
    cover_preview_uri: Optional[str] = None
    title: str = ""
    artist: str = ""
    description: str = ""
    release_date: str = ""
    genre: str = ""
    validation_error: Optional[str] = None
    cover_error: Optional[str] = None
    description_error: Optional[str] = None
    is_committing: bool = False
    is_generating_description: bool = False


async def _no_upload() -> None:
    return None


class IngestPipeline:
    def __init__(
        self,
        playlist: PlaylistStore,
        blob_store: BlobStorePort,
        preview_store: PreviewStorePort,
        logger,
        *,
        description_generator: DescriptionGeneratorPort | None = None,
        id_generator: TrackIdGenerator | None = None,
        max_audio_bytes: int = MAX_AUDIO_BYTES,
        max_cover_bytes: int = MAX_COVER_BYTES,
        placeholder_base: str = DEFAULT_PLACEHOLDER_BASE,
        ui_hooks: UiHooks | None = None,
        on_track_added: TrackAddedCallback | None = None,
    ) -> None:
        self.playlist = playlist
        self.blob_store = blob_store
        self.preview_store = preview_store
        self.logger = logger
        self.description_generator = description_generator
        self.id_generator = id_generator or TrackIdGenerator()
        self.max_audio_bytes = int(max_audio_bytes)
        self.max_cover_bytes = int(max_cover_bytes)
        self.placeholder_base = placeholder_base
        self.ui_hooks = ui_hooks or UiHooks()
        self.on_track_added = on_track_added
        self.pending = PendingUpload()

    # --- selection ---

    def validate_audio(self, file: CandidateFile) -> DerivedMetadata:
        pending = self.pending
        if file.size > self.max_audio_bytes:
            raise self._reject("audio", "too_large", file)
        if not is_audio_type(file.mime_type):
            raise self._reject("audio", "wrong_type", file)

        pending.audio_file = file
        pending.validation_error = None
        derived = derive_title_artist(file.name)
        pending.title = derived.title
        if derived.artist is not None:
            pending.artist = derived.artist
        self.logger.debug(
            "Accepted audio %s (%s bytes, %s) title=%r artist=%r",
            file.name,
            file.size,
            file.mime_type,
            derived.title,
            derived.artist,
        )
        return derived

    def validate_cover(self, file: CandidateFile) -> str:
        pending = self.pending
        if not is_image_type(file.mime_type):
            raise self._reject("cover", "wrong_type", file)
        if file.size > self.max_cover_bytes:
            raise self._reject("cover", "too_large", file)

        preview_uri = self.preview_store.create(file.read_bytes(), name=file.name)
        previous_uri = pending.cover_preview_uri
        pending.cover_file = file
        pending.cover_preview_uri = preview_uri
        pending.cover_error = None
        if previous_uri:
            self.preview_store.release(previous_uri)
        self.logger.debug("Accepted cover %s (%s bytes)", file.name, file.size)
        return preview_uri

    def remove_audio(self) -> None:
        self.pending.audio_file = None
        self.pending.validation_error = None

    def remove_cover(self) -> None:
        pending = self.pending
        if pending.cover_preview_uri:
            self.preview_store.release(pending.cover_preview_uri)
        pending.cover_file = None
        pending.cover_preview_uri = None
        pending.cover_error = None

    def update_form(
        self,
        *,
        title: str | None = None,
        artist: str | None = None,
        description: str | None = None,
        release_date: str | None = None,
        genre: str | None = None,
    ) -> None:
        pending = self.pending
        if title is not None:
            pending.title = title
        if artist is not None:
            pending.artist = artist
        if description is not None:
            pending.description = description
        if release_date is not None:
            pending.release_date = release_date
        if genre is not None:
            pending.genre = genre

    # --- description ---

    async def generate_description(self) -> str:
        pending = self.pending
        if self.description_generator is None:
            pending.description_error = DESCRIPTION_DISABLED_MESSAGE
            return ""
        if pending.is_generating_description:
            return pending.description
        pending.is_generating_description = True
        pending.description_error = None
        try:
            description = await self.description_generator.generate(pending.title, pending.artist)
        except Exception:
            self.logger.exception("Error generating description")
            pending.description_error = DESCRIPTION_FAILED_MESSAGE
            self.ui_hooks.warn(DESCRIPTION_FAILED_MESSAGE)
            return ""
        finally:
            pending.is_generating_description = False
        if self.pending is pending:
            pending.description = description
        return description

    # --- commit ---

    async def commit(self, form: TrackForm | None = None) -> Optional[Track]:
        """Upload the pending files and append the resulting track.

        Returns ``None`` when a commit is already running or when the pending
        upload was discarded while the uploads were in flight.
        """
        pending = self.pending
        if pending.is_committing:
            self.logger.warning("Commit already in progress; ignoring request")
            return None
        form = form or TrackForm()
        form_title = pending.title if form.title is None else form.title
        form_artist = pending.artist if form.artist is None else form.artist
        audio_file = pending.audio_file
        cover_file = pending.cover_file
        if audio_file is None or not form_title.strip() or not form_artist.strip():
            raise self._reject("form", "missing_fields")
        self.update_form(
            title=form.title,
            artist=form.artist,
            description=form.description,
            release_date=form.release_date,
            genre=form.genre,
        )

        pending.is_committing = True
        pending.validation_error = None
        self.logger.info(
            "Uploading %s%s",
            audio_file.name,
            f" with cover {cover_file.name}" if cover_file is not None else "",
        )
        try:
            audio_result, cover_result = await asyncio.gather(
                self._upload(audio_file),
                self._upload(cover_file) if cover_file is not None else _no_upload(),
                return_exceptions=True,
            )
        finally:
            pending.is_committing = False

        if self.pending is not pending:
            self.logger.info("Upload of %s finished after cancel; result discarded", audio_file.name)
            return None

        for label, result in (("audio", audio_result), ("cover", cover_result)):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self.logger.error("Upload failed (%s): %s", label, result, exc_info=result)
                pending.validation_error = UPLOAD_FAILED_MESSAGE
                self.ui_hooks.warn(UPLOAD_FAILED_MESSAGE)
                raise UploadError(f"{label.capitalize()} upload failed: {result}") from result

        title = pending.title.strip()
        track = Track(
            id=self.id_generator.next_id(),
            title=title,
            artist=pending.artist.strip(),
            audio_src=str(audio_result),
            cover_art=(
                str(cover_result)
                if cover_file is not None
                else placeholder_cover_url(title, self.placeholder_base)
            ),
            description=pending.description or None,
            release_date=pending.release_date or None,
            genre=pending.genre or None,
        )
        self.playlist.append(track)
        self.logger.info("Added track %s - %s (id=%s)", track.artist, track.title, track.id)
        self.reset()
        self.ui_hooks.info(f"Added {track.title} by {track.artist}")
        if self.on_track_added is not None:
            await self.on_track_added(track)
        return track

    def reset(self) -> None:
        previous = self.pending
        if previous.cover_preview_uri:
            self.preview_store.release(previous.cover_preview_uri)
        self.pending = PendingUpload()

    def cancel_upload(self) -> None:
        if self.pending.is_committing:
            self.logger.info("Upload cancelled; in-flight results will be discarded")
        self.reset()

    # --- internals ---

    async def _upload(self, file: CandidateFile) -> str:
        data = await asyncio.to_thread(file.read_bytes)
        uri = await self.blob_store.upload(data, file.mime_type, name=file.name)
        if not uri:
            raise UploadError(f"Upload of {file.name} returned no URI")
        return uri

    def _reject(
        self,
        field: str,
        reason: str,
        file: CandidateFile | None = None,
    ) -> ValidationError:
        message = error_message(
            ValidationError(reason, field=field),
            max_audio_bytes=self.max_audio_bytes,
            max_cover_bytes=self.max_cover_bytes,
        )
        error = ValidationError(reason, field=field, message=message)
        if field == "cover":
            self.pending.cover_error = message
        else:
            self.pending.validation_error = message
        self.logger.info(
            "Rejected %s%s: %s",
            field,
            f" {file.name}" if file is not None else "",
            reason,
        )
        self.ui_hooks.warn(message)
        return error
