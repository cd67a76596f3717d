"""
NaoLoad - API Configuration
===========================

Centralized configuration for the FastAPI service.
"""

import os
from dataclasses import dataclass
from typing import Optional

from naoload.core.config import _get_env_int, _get_env_list


@dataclass(frozen=True)
class APIConfig:
    """API configuration settings."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # CORS
    cors_origins: tuple[str, ...] = ("*",)

    # Burst throttle (independent of the daily download limits)
    rate_limit_requests: int = 60
    rate_limit_window: int = 60  # seconds


def load_api_config() -> APIConfig:
    """Load API configuration from environment."""
    return APIConfig(
        host=os.getenv("NAOLOAD_API_HOST", "0.0.0.0"),
        port=_get_env_int("NAOLOAD_API_PORT", 8000),
        debug=os.getenv("NAOLOAD_API_DEBUG", "false").lower() == "true",
        cors_origins=_get_env_list("NAOLOAD_CORS_ORIGINS", "*"),
        rate_limit_requests=_get_env_int("NAOLOAD_THROTTLE_REQUESTS", 60),
        rate_limit_window=_get_env_int("NAOLOAD_THROTTLE_WINDOW", 60),
    )


# Singleton instance
_config: Optional[APIConfig] = None


def get_api_config() -> APIConfig:
    """Get the API configuration singleton."""
    global _config
    if _config is None:
        _config = load_api_config()
    return _config


__all__ = ["APIConfig", "get_api_config", "load_api_config"]
