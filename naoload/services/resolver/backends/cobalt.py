"""
NaoLoad - Cobalt API Backend
============================

Resolves media through public Cobalt instances, trying each configured
instance in order until one answers with a usable status.
"""

from typing import Any, Dict, Optional, Sequence

from naoload.core.logger import logger
from naoload.utils.http import HTTPSessionManager
from ..errors import BackendError
from ..platforms import KNOWN_PLATFORMS, Platform
from ..result import MediaResult, PickerItem
from .base import request_json


SUCCESS_STATUSES = frozenset({"redirect", "tunnel", "picker"})


class CobaltBackend:
    """Multi-instance fallback backend speaking the Cobalt protocol."""

    name = "cobalt"
    platforms = KNOWN_PLATFORMS
    kinds = frozenset({"video", "audio"})
    generic = True

    def __init__(
        self,
        instances: Sequence[str],
        http: HTTPSessionManager,
        api_key: str = "",
        video_quality: int = 1080,
        timeout: float = 30.0,
    ):
        self.instances = [instance.rstrip("/") for instance in instances]
        self.http = http
        self.api_key = api_key
        self.video_quality = video_quality
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"Api-Key {self.api_key}"
        return headers

    async def resolve(
        self,
        url: str,
        identifier: Optional[str],
        kind: str,
        platform: Platform,
    ) -> MediaResult:
        body = {
            "url": url,
            "downloadMode": "audio" if kind == "audio" else "auto",
            "videoQuality": str(self.video_quality),
            "filenameStyle": "pretty",
        }

        last_error: Optional[BackendError] = None
        for index, instance in enumerate(self.instances, 1):
            logger.tree("Cobalt API Request", [
                ("Platform", platform.value.title()),
                ("URL", url[:50]),
                ("Instance", f"{index}/{len(self.instances)} {instance}"),
            ], emoji="🌐")
            try:
                return await self._request(instance, body, kind)
            except BackendError as e:
                logger.tree("Cobalt Instance Failed", [
                    ("Instance", instance),
                    ("Error", e.message[:80]),
                ], emoji="🔄")
                last_error = e

        if last_error is None:
            raise BackendError("No Cobalt instances configured", http_status=500, code="NO_INSTANCE")
        raise last_error

    async def _request(self, instance: str, body: Dict[str, Any], kind: str) -> MediaResult:
        status_code, data = await request_json(
            self.http, "POST", f"{instance}/", self.timeout, "Cobalt API",
            json=body, headers=self._headers(),
        )
        if not isinstance(data, dict):
            raise BackendError(
                f"Cobalt API returned status {status_code}",
                http_status=status_code if status_code >= 400 else 502,
            )

        status = data.get("status")
        logger.tree("Cobalt API Response", [
            ("Status", str(status)),
            ("Has URL", "Yes" if data.get("url") else "No"),
            ("Has Picker", "Yes" if data.get("picker") else "No"),
        ], emoji="📡")

        if status == "error":
            error = data.get("error", {})
            error_code = error.get("code", "unknown") if isinstance(error, dict) else str(error)
            raise BackendError(
                f"Cobalt error: {error_code}",
                http_status=status_code if status_code >= 400 else None,
                code="COBALT_ERROR",
            )

        if not isinstance(status, str) or status not in SUCCESS_STATUSES:
            raise BackendError(f"Cobalt returned unknown status: {status}", code="COBALT_ERROR")

        if status in ("redirect", "tunnel"):
            download_url = data.get("url")
            if not download_url or not isinstance(download_url, str):
                raise BackendError("Cobalt returned no download URL", code="COBALT_ERROR")
            return MediaResult.redirect(download_url, filename=data.get("filename"))

        # Carousel / multi-item post
        picker = data.get("picker")
        if not isinstance(picker, list):
            picker = []
        if kind == "audio" and isinstance(data.get("audio"), str) and data["audio"]:
            return MediaResult.redirect(data["audio"], filename=data.get("audioFilename"))

        items = [
            PickerItem(
                url=item["url"],
                type=item.get("type", "video"),
                thumbnail=item.get("thumb"),
            )
            for item in picker
            if isinstance(item, dict) and isinstance(item.get("url"), str) and item["url"]
        ]
        if not items:
            raise BackendError("Cobalt returned an empty picker", code="COBALT_ERROR")

        logger.tree("Cobalt Response: Picker", [
            ("Total Items", str(len(items))),
        ], emoji="🎠")
        return MediaResult.choices(items)


__all__ = ["CobaltBackend", "SUCCESS_STATUSES"]
