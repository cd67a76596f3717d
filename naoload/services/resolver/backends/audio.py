"""
NaoLoad - Audio Conversion Backend
==================================

RapidAPI YouTube-to-MP3 conversion. A job is submitted for a video id and
its status URL polled until a download link appears.
"""

import asyncio
from typing import Any, Optional
from urllib.parse import quote

from naoload.core.logger import logger
from naoload.utils.http import HTTPSessionManager
from ..errors import BackendError
from ..platforms import Platform
from ..polling import poll_until
from ..result import MediaResult
from .base import rapidapi_headers, request_json


FAILED_STATUSES = frozenset({"failed", "fail", "error"})


class AudioConvertBackend:
    """Polling backend for YouTube audio extraction."""

    name = "audio"
    platforms = frozenset({Platform.YOUTUBE, Platform.YOUTUBE_MUSIC})
    kinds = frozenset({"audio"})
    generic = False

    def __init__(
        self,
        api_key: str,
        host: str,
        http: HTTPSessionManager,
        attempts: int = 30,
        interval: float = 1.0,
        timeout: float = 30.0,
        sleep=asyncio.sleep,
    ):
        self.api_key = api_key
        self.host = host
        self.http = http
        self.attempts = attempts
        self.interval = interval
        self.timeout = timeout
        self._sleep = sleep

    async def resolve(
        self,
        url: str,
        identifier: Optional[str],
        kind: str,
        platform: Platform,
    ) -> MediaResult:
        if not self.api_key:
            raise BackendError("API key not configured", http_status=500, code="API_KEY_MISSING")
        if not identifier:
            raise BackendError("Could not find a YouTube video id in the URL", http_status=400, code="MISSING_IDENTIFIER")

        headers = rapidapi_headers(self.host, self.api_key)
        submit_url = f"https://{self.host}/dl?id={quote(identifier)}"

        data = await self._fetch(submit_url, headers)
        download_url = self._evaluate(data)
        if download_url:
            return self._result(download_url, data)

        status_url = data.get("status_url") or data.get("progress_url")
        poll_url = status_url or submit_url
        logger.tree("Audio Conversion Queued", [
            ("Video ID", identifier),
            ("Polling", "status URL" if status_url else "resubmit"),
        ], emoji="🎵")

        async def attempt(n: int) -> Optional[MediaResult]:
            polled = await self._fetch(poll_url, headers)
            found = self._evaluate(polled)
            return self._result(found, polled) if found else None

        return await poll_until(attempt, self.attempts, self.interval, self._sleep, label=self.name)

    async def _fetch(self, url: str, headers) -> dict:
        status, data = await request_json(self.http, "GET", url, self.timeout, "Audio API", headers=headers)
        if status >= 400 or not isinstance(data, dict):
            message = data.get("message") or data.get("msg") if isinstance(data, dict) else None
            raise BackendError(
                message or f"Audio API returned status {status}",
                http_status=status if status >= 400 else 502,
            )
        return data

    @staticmethod
    def _evaluate(data: dict) -> Optional[str]:
        """Return the finished link, None while processing; raise on failure."""
        error = data.get("error")
        if error:
            message = error if isinstance(error, str) else data.get("msg") or data.get("message")
            raise BackendError(message or "Audio conversion failed")

        status = str(data.get("status") or "").lower()
        if status in FAILED_STATUSES:
            raise BackendError(data.get("msg") or data.get("message") or "Audio conversion failed")

        link = data.get("download_url") or data.get("link")
        if isinstance(link, str) and link:
            return link
        return None

    @staticmethod
    def _result(download_url: str, data: Any) -> MediaResult:
        title = data.get("title") if isinstance(data, dict) else None
        return MediaResult.redirect(download_url, quality="Audio", title=title if isinstance(title, str) else None)


__all__ = ["AudioConvertBackend"]
