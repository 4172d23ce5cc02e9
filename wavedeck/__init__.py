"""Playlist playback controller with an upload-to-playlist pipeline."""

__version__ = "0.1.0"
