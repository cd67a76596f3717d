"""
NaoLoad - All-in-One API Backend
================================

RapidAPI "download-all-in-one" service. The job endpoint is re-posted at a
fixed interval until it reports Success or Failed.
"""

import asyncio
from typing import Any, Dict, Optional

from naoload.core.logger import logger
from naoload.utils.http import HTTPSessionManager
from ..errors import BackendError
from ..platforms import KNOWN_PLATFORMS, Platform
from ..polling import poll_until
from ..result import MediaResult
from .base import rapidapi_headers, request_json


class AllInOneBackend:
    """Polling backend covering every supported platform."""

    name = "allinone"
    platforms = KNOWN_PLATFORMS
    kinds = frozenset({"video", "audio"})
    generic = True

    def __init__(
        self,
        api_key: str,
        host: str,
        http: HTTPSessionManager,
        attempts: int = 30,
        interval: float = 1.0,
        video_quality: int = 1080,
        timeout: float = 30.0,
        sleep=asyncio.sleep,
    ):
        self.api_key = api_key
        self.host = host
        self.http = http
        self.attempts = attempts
        self.interval = interval
        self.video_quality = video_quality
        self.timeout = timeout
        self._sleep = sleep

    def endpoint_for(self, platform: Platform) -> str:
        """YouTube Music has its own endpoint; everything else goes to /media."""
        if platform is Platform.YOUTUBE_MUSIC:
            return f"https://{self.host}/api/v1/download/music"
        return f"https://{self.host}/api/v1/download/media"

    async def resolve(
        self,
        url: str,
        identifier: Optional[str],
        kind: str,
        platform: Platform,
    ) -> MediaResult:
        if not self.api_key:
            raise BackendError("API key not configured", http_status=500, code="API_KEY_MISSING")

        endpoint = self.endpoint_for(platform)
        headers = rapidapi_headers(self.host, self.api_key)
        body = {"url": url, "video_quality": self.video_quality}

        async def attempt(n: int) -> Optional[MediaResult]:
            status, data = await request_json(
                self.http, "POST", endpoint, self.timeout, "All-in-One API",
                json=body, headers=headers,
            )
            if status >= 400 or not isinstance(data, dict):
                message = data.get("message") if isinstance(data, dict) else None
                raise BackendError(
                    message or f"All-in-One API returned status {status}",
                    http_status=status if status >= 400 else 502,
                )

            logger.debug("All-in-One Poll", [
                ("Attempt", str(n + 1)),
                ("Status", str(data.get("status"))),
                ("Progress", str(data.get("progress"))),
            ])

            if data.get("error"):
                raise BackendError(data.get("message") or "API returned an error")

            if data.get("status") == "Success":
                result = self._pick(data, kind)
                if result is None:
                    raise BackendError("Download finished without a media link", code="NO_MEDIA")
                return result

            if data.get("status") == "Failed":
                raise BackendError(data.get("message") or "Download failed")

            return None

        return await poll_until(attempt, self.attempts, self.interval, self._sleep, label=self.name)

    def _pick(self, data: Dict[str, Any], kind: str) -> Optional[MediaResult]:
        """Choose audio or the first video rendition from a finished job."""
        media = data.get("media_result")
        first = media[0] if isinstance(media, list) and media and isinstance(media[0], dict) else {}
        audio_url = data.get("audio_url")
        if not isinstance(audio_url, str):
            audio_url = None
        download_url = first.get("download_url")

        if kind == "audio" and audio_url:
            return MediaResult.redirect(audio_url, quality="Audio")
        if download_url and isinstance(download_url, str):
            quality = first.get("media_type")
            return MediaResult.redirect(download_url, quality=quality if isinstance(quality, str) and quality else "Video")
        if audio_url:
            # Video job that only produced audio
            return MediaResult.redirect(audio_url, quality="Audio", media_kind="audio")
        return None


__all__ = ["AllInOneBackend"]
