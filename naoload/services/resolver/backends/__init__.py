"""
NaoLoad - Resolver Backends
===========================

Interchangeable third-party resolution services. Which ones run, and in
what order, is decided by ``NAOLOAD_BACKENDS``.

Available:
- allinone: RapidAPI all-in-one downloader (polling)
- audio: RapidAPI YouTube audio conversion (polling, audio only)
- cobalt: public Cobalt instances (multi-instance fallback)
- free: keyless scraping endpoint (heuristic parsing)
"""

import asyncio
from typing import List, Optional

from naoload.core.config import Config
from naoload.core.logger import logger
from naoload.utils.http import HTTPSessionManager
from .allinone import AllInOneBackend
from .audio import AudioConvertBackend
from .base import Backend, supports
from .cobalt import CobaltBackend
from .free import FreeBackend


BACKEND_NAMES = ("allinone", "audio", "cobalt", "free")


def build_backend(
    name: str,
    config: Config,
    http: HTTPSessionManager,
    sleep=asyncio.sleep,
) -> Optional[Backend]:
    """Instantiate one backend by name; None for unknown names."""
    if name == "allinone":
        return AllInOneBackend(
            api_key=config.RAPIDAPI_KEY,
            host=config.ALLINONE_HOST,
            http=http,
            attempts=config.POLL_ATTEMPTS,
            interval=config.POLL_INTERVAL,
            video_quality=config.VIDEO_QUALITY,
            timeout=config.REQUEST_TIMEOUT,
            sleep=sleep,
        )
    if name == "audio":
        return AudioConvertBackend(
            api_key=config.RAPIDAPI_KEY,
            host=config.AUDIO_HOST,
            http=http,
            attempts=config.POLL_ATTEMPTS,
            interval=config.POLL_INTERVAL,
            timeout=config.REQUEST_TIMEOUT,
            sleep=sleep,
        )
    if name == "cobalt":
        return CobaltBackend(
            instances=config.COBALT_INSTANCES,
            http=http,
            api_key=config.COBALT_API_KEY,
            video_quality=config.VIDEO_QUALITY,
            timeout=config.REQUEST_TIMEOUT,
        )
    if name == "free":
        return FreeBackend(
            endpoint=config.FREE_ENDPOINT,
            http=http,
            timeout=config.REQUEST_TIMEOUT,
        )
    return None


def build_backends(config: Config, http: HTTPSessionManager) -> List[Backend]:
    """Instantiate the configured backend chain in order."""
    backends = []
    for name in config.BACKENDS:
        backend = build_backend(name.lower(), config, http)
        if backend is None:
            logger.tree("Unknown Backend Skipped", [
                ("Name", name),
                ("Available", ", ".join(BACKEND_NAMES)),
            ], emoji="⚠️")
            continue
        backends.append(backend)
    return backends


__all__ = [
    "Backend",
    "BACKEND_NAMES",
    "AllInOneBackend",
    "AudioConvertBackend",
    "CobaltBackend",
    "FreeBackend",
    "build_backend",
    "build_backends",
    "supports",
]
