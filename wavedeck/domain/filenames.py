"""Default metadata derived from uploaded file names."""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

ARTIST_TITLE_SEPARATOR = " - "
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


class DerivedMetadata(NamedTuple):
    title: str
    artist: Optional[str]


def strip_extension(file_name: str) -> str:
    return _EXTENSION_RE.sub("", file_name or "")


def derive_title_artist(file_name: str) -> DerivedMetadata:
    """Split ``"Artist - Title.ext"`` into its parts.

    Only an exact two-way split is treated as artist/title; anything else
    becomes the title and leaves the artist for the user.
    """
    stem = strip_extension(file_name)
    parts = stem.split(ARTIST_TITLE_SEPARATOR)
    if len(parts) == 2:
        return DerivedMetadata(title=parts[1].strip(), artist=parts[0].strip())
    return DerivedMetadata(title=stem.strip(), artist=None)

