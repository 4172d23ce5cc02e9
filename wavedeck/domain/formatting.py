"""Display helpers for playback positions."""

from __future__ import annotations

import math


def format_time(seconds: float) -> str:
    """Render seconds as ``m:ss``; negative or NaN values render as ``0:00``."""
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        return "0:00"
    if not math.isfinite(value) or value < 0:
        return "0:00"
    minutes = int(value // 60)
    secs = int(value % 60)
    return f"{minutes}:{secs:02d}"
