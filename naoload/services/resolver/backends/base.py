"""
NaoLoad - Backend Interface
===========================

The contract every resolution backend implements, plus the shared
upstream request helper.
"""

import asyncio
import json
from typing import Any, Dict, FrozenSet, Optional, Protocol, Tuple

import aiohttp

from naoload.core.logger import logger
from naoload.utils.http import HTTPSessionManager, make_timeout
from ..errors import BackendError
from ..platforms import Platform
from ..result import MediaResult


class Backend(Protocol):
    """A third-party service that turns a page URL into media links."""

    name: str
    platforms: FrozenSet[Platform]
    kinds: FrozenSet[str]
    # Accepts URLs whose platform could not be detected
    generic: bool

    async def resolve(
        self,
        url: str,
        identifier: Optional[str],
        kind: str,
        platform: Platform,
    ) -> MediaResult:
        """Resolve ``url``; raise BackendError when the upstream fails."""
        ...


def supports(backend: Backend, platform: Platform, kind: str) -> bool:
    """Whether a backend will take ``kind`` requests for URLs of ``platform``."""
    if kind not in backend.kinds:
        return False
    if platform is Platform.UNKNOWN:
        return backend.generic
    return platform in backend.platforms


def rapidapi_headers(host: str, api_key: str) -> Dict[str, str]:
    return {
        "x-rapidapi-host": host,
        "x-rapidapi-key": api_key,
        "Content-Type": "application/json",
    }


async def request_json(
    http: HTTPSessionManager,
    method: str,
    url: str,
    timeout: float,
    label: str,
    **kwargs,
) -> Tuple[int, Any]:
    """
    Issue one upstream request and decode its body.

    Returns (status, payload) where payload is the decoded JSON, the raw text
    when the body is not JSON, or None when it is empty. Network failures
    and timeouts raise BackendError.
    """
    call = http.post if method == "POST" else http.get
    try:
        async with call(url, timeout=make_timeout(timeout), **kwargs) as resp:
            status = resp.status
            text = await resp.text()
    except asyncio.TimeoutError:
        logger.tree(f"{label} Timeout", [
            ("URL", url[:60]),
            ("Timeout", f"{timeout:.0f}s"),
        ], emoji="⏳")
        raise BackendError(f"{label} request timed out", code="UPSTREAM_TIMEOUT")
    except aiohttp.ClientError as e:
        logger.tree(f"{label} Connection Error", [
            ("URL", url[:60]),
            ("Error", str(e)[:50]),
        ], emoji="❌")
        raise BackendError(f"{label} connection failed: {type(e).__name__}", code="UPSTREAM_UNREACHABLE")

    if not text:
        return status, None
    try:
        return status, json.loads(text)
    except ValueError:
        return status, text


__all__ = ["Backend", "supports", "rapidapi_headers", "request_json"]
