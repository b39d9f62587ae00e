"""Application settings and environment loading utilities."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


def _load_dotenv() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip().strip("\"'"))


_load_dotenv()


def _parse_int(value: Optional[str], name: str, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for environment variable {name}: {value!r}") from exc
    if parsed < 0:
        raise RuntimeError(f"Environment variable {name} must not be negative: {parsed}")
    return parsed


def _parse_log_level(value: Optional[str], name: str) -> str:
    level = (value or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise RuntimeError(f"Invalid log level for environment variable {name}: {value!r}")
    return level


@dataclass(frozen=True)
class Settings:
    """Runtime configuration derived from environment variables."""

    host: str = "0.0.0.0"
    port: int = 9999
    rate_limit_requests: int = 60
    rate_limit_window_seconds: int = 60
    api_token: Optional[str] = None
    alert_sound: str = "Glass"
    alert_volume: str = "1"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST") or "0.0.0.0",
            port=_parse_int(os.getenv("PORT"), "PORT", 9999),
            rate_limit_requests=_parse_int(os.getenv("RATE_LIMIT"), "RATE_LIMIT", 60),
            api_token=os.getenv("API_TOKEN") or None,
            alert_sound=os.getenv("ALERT_SOUND") or "Glass",
            alert_volume=os.getenv("ALERT_VOLUME") or "1",
            log_level=_parse_log_level(os.getenv("LOG_LEVEL"), "LOG_LEVEL"),
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings.from_env()
