"""Error taxonomy shared by the playlist, playback and ingest layers."""

from __future__ import annotations

VALIDATION_REASONS = ("too_large", "wrong_type", "missing_fields")


class WavedeckError(Exception):
    """Base class for all project errors."""


class ValidationError(WavedeckError):
    """User-correctable input problem.

    ``reason`` is one of ``too_large``, ``wrong_type`` or ``missing_fields``;
    ``field`` names the selection it applies to (``audio``, ``cover`` or
    ``form``).
    """

    def __init__(self, reason: str, *, field: str = "form", message: str = "") -> None:
        if reason not in VALIDATION_REASONS:
            raise ValueError(f"Unknown validation reason: {reason}")
        self.reason = reason
        self.field = field
        super().__init__(message or reason)


class UploadError(WavedeckError):
    """Raised when any upload of a commit attempt fails."""


class NotFoundError(WavedeckError, LookupError):
    """Track id is not present in the playlist."""


class DuplicateIdError(WavedeckError, ValueError):
    """Track id is already present in the playlist."""


class EngineError(WavedeckError, RuntimeError):
    """Media engine failed to start or resume playback."""
