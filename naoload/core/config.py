"""
NaoLoad - Configuration
=======================

Central configuration from environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


ROOT_DIR = Path(__file__).parent.parent.parent
DATA_DIR = ROOT_DIR / "data"
LOGS_DIR = ROOT_DIR / "logs"

DATA_DIR.mkdir(exist_ok=True)
LOGS_DIR.mkdir(exist_ok=True)


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int with default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float with default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_env_list(key: str, default: str = "") -> Tuple[str, ...]:
    """Get environment variable as a tuple of strings (comma-separated)."""
    value = os.getenv(key, default)
    if not value:
        return ()
    return tuple(x.strip() for x in value.split(",") if x.strip())


# Public Cobalt instances, tried in order
DEFAULT_COBALT_INSTANCES = (
    "https://cobalt-api.kwiatekmiki.com",
    "https://cobalt-backend.canine.tools",
    "https://capi.3kh0.net",
)


@dataclass(frozen=True)
class Config:
    """Service configuration from environment variables."""

    # Backend chain, in fallback order (allinone, audio, cobalt, free)
    BACKENDS: Tuple[str, ...] = ("allinone",)

    # RapidAPI
    RAPIDAPI_KEY: str = ""
    ALLINONE_HOST: str = "download-all-in-one2.p.rapidapi.com"
    AUDIO_HOST: str = "youtube-mp36.p.rapidapi.com"
    VIDEO_QUALITY: int = 1080

    # Cobalt
    COBALT_INSTANCES: Tuple[str, ...] = DEFAULT_COBALT_INSTANCES
    COBALT_API_KEY: str = ""

    # Keyless endpoint
    FREE_ENDPOINT: str = ""

    # Polling
    POLL_ATTEMPTS: int = 30
    POLL_INTERVAL: float = 1.0

    # Upstream request timeout (seconds)
    REQUEST_TIMEOUT: float = 30.0

    # Daily limits per media kind
    VIDEO_DAILY_LIMIT: int = 4
    AUDIO_DAILY_LIMIT: int = 10

    # Admin dashboard
    ADMIN_PASSWORD: str = ""

    # Database (empty string disables the counter/log store)
    DATABASE_PATH: Optional[str] = field(default_factory=lambda: str(DATA_DIR / "naoload.db"))

    @property
    def daily_limits(self) -> dict:
        """Per-kind daily thresholds."""
        return {
            "video": self.VIDEO_DAILY_LIMIT,
            "audio": self.AUDIO_DAILY_LIMIT,
        }

    @property
    def store_configured(self) -> bool:
        """Whether a counter/log store is configured."""
        return bool(self.DATABASE_PATH)


def load_config() -> Config:
    """Load configuration from environment."""
    return Config(
        BACKENDS=_get_env_list("NAOLOAD_BACKENDS", "allinone"),
        RAPIDAPI_KEY=os.getenv("RAPIDAPI_KEY", ""),
        ALLINONE_HOST=os.getenv("NAOLOAD_ALLINONE_HOST", "download-all-in-one2.p.rapidapi.com"),
        AUDIO_HOST=os.getenv("NAOLOAD_AUDIO_HOST", "youtube-mp36.p.rapidapi.com"),
        VIDEO_QUALITY=_get_env_int("NAOLOAD_VIDEO_QUALITY", 1080),
        COBALT_INSTANCES=(
            _get_env_list("NAOLOAD_COBALT_INSTANCES") or DEFAULT_COBALT_INSTANCES
        ),
        COBALT_API_KEY=os.getenv("NAOLOAD_COBALT_API_KEY", ""),
        FREE_ENDPOINT=os.getenv("NAOLOAD_FREE_ENDPOINT", ""),
        POLL_ATTEMPTS=_get_env_int("NAOLOAD_POLL_ATTEMPTS", 30),
        POLL_INTERVAL=_get_env_float("NAOLOAD_POLL_INTERVAL", 1.0),
        REQUEST_TIMEOUT=_get_env_float("NAOLOAD_REQUEST_TIMEOUT", 30.0),
        VIDEO_DAILY_LIMIT=_get_env_int("NAOLOAD_VIDEO_DAILY_LIMIT", 4),
        AUDIO_DAILY_LIMIT=_get_env_int("NAOLOAD_AUDIO_DAILY_LIMIT", 10),
        ADMIN_PASSWORD=os.getenv("NAOLOAD_ADMIN_PASSWORD", ""),
        DATABASE_PATH=os.getenv("NAOLOAD_DATABASE_PATH", str(DATA_DIR / "naoload.db")),
    )


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the configuration singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


__all__ = ["Config", "load_config", "get_config", "DATA_DIR", "LOGS_DIR"]
