"""Static defaults shared by the runtime and the bootstrap."""

from __future__ import annotations

DEFAULT_AD_INTERVAL = 20
DEFAULT_VOLUME = 0.75
MAX_AUDIO_BYTES = 15 * 1024 * 1024
MAX_COVER_BYTES = 5 * 1024 * 1024

SEED_TRACKS = (
    {
        "id": 1,
        "title": "Midnight City",
        "artist": "M83",
        "audio_src": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3",
        "cover_art": "https://picsum.photos/seed/midnight/200",
    },
    {
        "id": 2,
        "title": "Intro",
        "artist": "The xx",
        "audio_src": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-2.mp3",
        "cover_art": "https://picsum.photos/seed/intro/200",
    },
    {
        "id": 3,
        "title": "Genesis",
        "artist": "Grimes",
        "audio_src": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-3.mp3",
        "cover_art": "https://picsum.photos/seed/genesis/200",
    },
    {
        "id": 4,
        "title": "Electric Feel",
        "artist": "MGMT",
        "audio_src": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-4.mp3",
        "cover_art": "https://picsum.photos/seed/electric/200",
    },
)
