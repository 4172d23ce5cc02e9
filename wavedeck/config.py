"""Configuration loading from environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .utils import parse_float_env, parse_int_env, resolve_path

MEGABYTE = 1024 * 1024


@dataclass(frozen=True)
class AppConfig:
    log_level: str
    file_log_level: str
    log_dir: str
    log_file: str
    blob_dir: str
    preview_dir: str
    ad_interval: int
    max_audio_bytes: int
    max_cover_bytes: int
    default_volume: float
    placeholder_cover_base: str
    description_enabled: bool
    lm_base_url: str
    lm_api_key: str
    lm_model: str
    lm_timeout_seconds: int
    lm_temperature: float
    lm_max_tokens: int


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_config() -> AppConfig:
    base_dir = str(Path(__file__).resolve().parents[1])
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    file_log_level = os.getenv("FILE_LOG_LEVEL", "DEBUG").upper()
    log_dir = resolve_path(os.getenv("LOG_DIR", "logs"), base_dir)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(
        log_dir, f"app_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.log"
    )
    blob_dir = resolve_path(os.getenv("BLOB_DIR", "uploads"), base_dir)
    preview_dir = resolve_path(os.getenv("PREVIEW_DIR", ".previews"), base_dir)
    ad_interval = parse_int_env("AD_INTERVAL", 20, min_value=1, max_value=1000)
    max_audio_mb = parse_int_env("MAX_AUDIO_MB", 15, min_value=1, max_value=2048)
    max_cover_mb = parse_int_env("MAX_COVER_MB", 5, min_value=1, max_value=512)
    default_volume = parse_float_env(
        "DEFAULT_VOLUME",
        0.75,
        min_value=0.0,
        max_value=1.0,
    )
    placeholder_cover_base = (
        os.getenv("PLACEHOLDER_COVER_BASE", "https://picsum.photos/seed").strip().rstrip("/")
        or "https://picsum.photos/seed"
    )
    description_enabled = _env_flag("DESCRIPTION_ENABLED", "1")
    lm_base_url = os.getenv("LM_STUDIO_BASE_URL", "http://127.0.0.1:1234/v1").strip()
    lm_api_key = os.getenv("LM_STUDIO_API_KEY", "lm-studio").strip()
    lm_model = os.getenv("LM_STUDIO_MODEL", "").strip()
    lm_timeout_seconds = parse_int_env(
        "LM_STUDIO_TIMEOUT_SECONDS",
        60,
        min_value=0,
        max_value=600,
    )
    lm_temperature = parse_float_env(
        "LM_STUDIO_TEMPERATURE",
        0.8,
        min_value=0.0,
        max_value=2.0,
    )
    lm_max_tokens = parse_int_env(
        "LM_STUDIO_MAX_TOKENS",
        120,
        min_value=16,
        max_value=4096,
    )
    return AppConfig(
        log_level=log_level,
        file_log_level=file_log_level,
        log_dir=log_dir,
        log_file=log_file,
        blob_dir=blob_dir,
        preview_dir=preview_dir,
        ad_interval=ad_interval,
        max_audio_bytes=max_audio_mb * MEGABYTE,
        max_cover_bytes=max_cover_mb * MEGABYTE,
        default_volume=default_volume,
        placeholder_cover_base=placeholder_cover_base,
        description_enabled=description_enabled,
        lm_base_url=lm_base_url,
        lm_api_key=lm_api_key,
        lm_model=lm_model,
        lm_timeout_seconds=lm_timeout_seconds,
        lm_temperature=lm_temperature,
        lm_max_tokens=lm_max_tokens,
    )
