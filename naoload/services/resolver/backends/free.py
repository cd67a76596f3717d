"""
NaoLoad - Keyless Endpoint Backend
==================================

Single GET against a free scraping endpoint, then heuristic extraction over
whatever JSON comes back.
"""

import json
from typing import Optional

from naoload.core.constants import RAW_PAYLOAD_PREVIEW
from naoload.core.logger import logger
from naoload.utils.http import HTTPSessionManager
from ..errors import BackendError
from ..platforms import KNOWN_PLATFORMS, Platform
from ..result import MediaResult
from ..rules import EXTRACTION_RULES, apply_rules
from .base import request_json


class FreeBackend:
    """Heuristic-parsing backend for keyless endpoints."""

    name = "free"
    platforms = KNOWN_PLATFORMS
    kinds = frozenset({"video", "audio"})
    generic = True

    def __init__(
        self,
        endpoint: str,
        http: HTTPSessionManager,
        timeout: float = 30.0,
        rules=EXTRACTION_RULES,
    ):
        self.endpoint = endpoint
        self.http = http
        self.timeout = timeout
        self.rules = rules

    async def resolve(
        self,
        url: str,
        identifier: Optional[str],
        kind: str,
        platform: Platform,
    ) -> MediaResult:
        if not self.endpoint:
            raise BackendError("Free endpoint not configured", http_status=500, code="ENDPOINT_MISSING")

        status, payload = await request_json(
            self.http, "GET", self.endpoint, self.timeout, "Free API",
            params={"url": url},
        )
        if status >= 400:
            raise BackendError(f"Free API returned status {status}", http_status=status)

        result = apply_rules(payload, kind, source_url=url, rules=self.rules)
        if result is not None:
            return result

        preview = payload if isinstance(payload, str) else json.dumps(payload, default=str)
        logger.tree("Free API Unrecognized Response", [
            ("Platform", platform.value.title()),
            ("Response", preview[:100]),
        ], emoji="⚠️")
        return MediaResult.failure(
            "UNRECOGNIZED_RESPONSE",
            f"No media link found in upstream response: {preview[:RAW_PAYLOAD_PREVIEW]}",
            http_status=502,
        )


__all__ = ["FreeBackend"]
