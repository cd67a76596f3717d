"""
NaoLoad - Burst Throttle Middleware
===================================

Per-client, per-path token buckets that shield the resolver from request
floods. Daily download quotas are a separate concern handled by
services.rate_limiter.
"""

import math
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from naoload.core.logger import logger
from naoload.api.config import get_api_config
from naoload.api.errors import ErrorCode, error_response
from naoload.api.utils import get_client_ip


# =============================================================================
# Bucket
# =============================================================================

@dataclass
class TokenBucket:
    """Refills continuously at ``rate`` tokens/second up to ``capacity``."""

    capacity: int
    rate: float
    tokens: float
    stamp: float

    def take(self, now: float) -> bool:
        self.tokens = min(self.capacity, self.tokens + (now - self.stamp) * self.rate)
        self.stamp = now
        if self.tokens < 1:
            return False
        self.tokens -= 1
        return True

    def wait_seconds(self) -> int:
        """Whole seconds until the next token, at least 1."""
        missing = max(0.0, 1 - self.tokens)
        return max(1, math.ceil(missing / self.rate))


@dataclass(frozen=True)
class ThrottleDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after: Optional[int] = None


# =============================================================================
# Throttle
# =============================================================================

class BurstThrottle:
    """
    Token buckets keyed by (client, path).

    The bucket map is bounded; least recently used clients are dropped
    first once ``max_clients`` is exceeded.
    """

    def __init__(
        self,
        limit: int = 60,
        window: int = 60,
        max_clients: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window = window
        self.max_clients = max_clients
        self._clock = clock
        self._buckets: "OrderedDict[Tuple[str, str], TokenBucket]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._buckets)

    def _bucket(self, key: Tuple[str, str], now: float) -> TokenBucket:
        bucket = self._buckets.get(key)
        if bucket is not None:
            self._buckets.move_to_end(key)
            return bucket

        bucket = TokenBucket(
            capacity=self.limit,
            rate=self.limit / self.window,
            tokens=float(self.limit),
            stamp=now,
        )
        self._buckets[key] = bucket
        while len(self._buckets) > self.max_clients:
            self._buckets.popitem(last=False)
        return bucket

    def hit(self, client_ip: str, path: str) -> ThrottleDecision:
        """Spend one token for this client on this path."""
        now = self._clock()
        bucket = self._bucket((client_ip, "/" + path.strip("/")), now)

        if bucket.take(now):
            return ThrottleDecision(True, self.limit, int(bucket.tokens))
        return ThrottleDecision(False, self.limit, 0, bucket.wait_seconds())


# =============================================================================
# Middleware
# =============================================================================

class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects bursts with 429 TOO_MANY_REQUESTS. Health probes pass freely."""

    EXEMPT_PATHS = frozenset({"/health"})

    def __init__(self, app, throttle: Optional[BurstThrottle] = None):
        super().__init__(app)
        self._throttle = throttle or get_throttle()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" or path in self.EXEMPT_PATHS:
            return await call_next(request)

        client_ip = get_client_ip(request)
        decision = self._throttle.hit(client_ip, path)
        limit_headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
        }

        if not decision.allowed:
            logger.tree("Throttled", [
                ("IP", client_ip),
                ("Path", path[:50]),
                ("Retry After", f"{decision.retry_after}s"),
            ], emoji="⚠️")
            return error_response(
                ErrorCode.TOO_MANY_REQUESTS,
                extra={"retry_after": decision.retry_after},
                headers={"Retry-After": str(decision.retry_after), **limit_headers},
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        return response


# =============================================================================
# Singleton
# =============================================================================

_throttle: Optional[BurstThrottle] = None


def get_throttle() -> BurstThrottle:
    """Process-wide throttle built from the API config."""
    global _throttle
    if _throttle is None:
        config = get_api_config()
        _throttle = BurstThrottle(
            limit=config.rate_limit_requests,
            window=config.rate_limit_window,
        )
    return _throttle


__all__ = [
    "BurstThrottle",
    "RateLimitMiddleware",
    "ThrottleDecision",
    "TokenBucket",
    "get_throttle",
]
