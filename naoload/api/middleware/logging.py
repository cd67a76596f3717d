"""
NaoLoad - Logging Middleware
============================

One log line per API call, tagged with a short request id that is echoed
back in the X-Request-ID header.
"""

import time
import uuid
from typing import Callable, List, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from naoload.core.logger import logger
from naoload.api.utils import get_client_ip


# Resolutions poll upstream services, so only really slow calls are flagged
SLOW_REQUEST_MS = 5000

QUIET_PATHS = frozenset({"/health", "/favicon.ico", "/robots.txt"})


def _log_response(status: int, fields: List[Tuple[str, str]], elapsed_ms: float) -> None:
    if status >= 500:
        logger.error("API Response", fields)
    elif status in (401, 429):
        logger.warning("API Response", fields)
    elif status >= 400 or elapsed_ms > SLOW_REQUEST_MS:
        logger.debug("API Response", fields)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Times each request and logs it at a level chosen by status code."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        fields = [
            ("ID", request_id),
            ("Route", f"{request.method} {path[:50]}"),
            ("IP", get_client_ip(request)),
        ]

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error("API Failure", fields + [
                ("Error", str(e)[:50]),
                ("Duration", f"{elapsed_ms:.0f}ms"),
            ])
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        _log_response(response.status_code, fields + [
            ("Status", str(response.status_code)),
            ("Duration", f"{elapsed_ms:.0f}ms"),
        ], elapsed_ms)
        return response


__all__ = ["LoggingMiddleware"]
