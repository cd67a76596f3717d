"""
NaoLoad - Download Router
=========================

Resolve endpoint plus the client-side usage log hook.
"""

from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse

from naoload.core.constants import FORMAT_BY_KIND, MEDIA_KINDS, VALID_FORMATS
from naoload.core.logger import logger
from naoload.api.dependencies import get_limiter, get_resolver_service, get_usage
from naoload.api.errors import ErrorCode, bad_request, rate_limit_exceeded
from naoload.api.models import DownloadRequest, LogDownloadRequest, SuccessResponse
from naoload.api.utils import get_client_ip
from naoload.services.rate_limiter import DownloadRateLimiter
from naoload.services.resolver import ResolverService, UnsupportedPlatform, ResolveError
from naoload.services.resolver.platforms import KNOWN_PLATFORMS
from naoload.services.usage import UsageLogger


router = APIRouter(tags=["Download"])

LOGGABLE_PLATFORMS = frozenset(p.value for p in KNOWN_PLATFORMS)


@router.post("/download")
async def download(
    payload: DownloadRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    resolver: ResolverService = Depends(get_resolver_service),
    limiter: DownloadRateLimiter = Depends(get_limiter),
    usage: UsageLogger = Depends(get_usage),
):
    """
    Resolve a social-media URL into a direct link or a picker.

    The daily quota is checked before resolving and consumed only after
    a successful result.
    """
    kind = payload.type or "video"
    if kind not in MEDIA_KINDS:
        raise bad_request(f"Unsupported type: {kind}. Use video or audio.")

    url = (payload.url or "").strip()
    if not url:
        raise bad_request("Missing URL")

    client_ip = get_client_ip(request)
    quota = limiter.check(client_ip, kind)
    if not quota.allowed:
        logger.tree("Daily Limit Reached", [
            ("IP", client_ip),
            ("Type", kind),
            ("Limit", str(quota.limit)),
        ], emoji="🚫")
        raise rate_limit_exceeded(
            f"Daily {kind} limit reached ({quota.limit}/day). Try again tomorrow."
        )

    try:
        result = await resolver.handle(url, kind)
    except UnsupportedPlatform as e:
        raise bad_request(e.message, code=ErrorCode.UNSUPPORTED_PLATFORM)
    except ResolveError as e:
        raise bad_request(e.message)

    if not result.ok:
        status_code = result.http_status if result.http_status and 400 <= result.http_status < 600 else 500
        return JSONResponse(status_code=status_code, content=result.to_dict())

    remaining = limiter.consume(client_ip, kind)
    background_tasks.add_task(usage.record, result.platform or "unknown", FORMAT_BY_KIND[kind])

    body: Dict[str, Any] = result.to_dict()
    body["remaining"] = remaining
    return body


@router.post("/log-download")
async def log_download(
    payload: LogDownloadRequest,
    usage: UsageLogger = Depends(get_usage),
) -> SuccessResponse:
    """Record a download reported by the client. Storage failures are not surfaced."""
    platform = (payload.platform or "").strip().lower()
    fmt = (payload.format or "").strip().lower()

    if not platform or not fmt:
        raise bad_request("Missing platform or format")
    if platform not in LOGGABLE_PLATFORMS:
        raise bad_request(f"Unknown platform: {platform}")
    if fmt not in VALID_FORMATS:
        raise bad_request(f"Invalid format: {fmt}. Use mp4 or mp3.")

    usage.record(platform, fmt)
    return SuccessResponse()


__all__ = ["router"]
