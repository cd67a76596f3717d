"""
NaoLoad - API Middleware
========================

Request/response middleware for the API.
"""

from .rate_limit import BurstThrottle, RateLimitMiddleware, get_throttle
from .logging import LoggingMiddleware

__all__ = [
    "RateLimitMiddleware",
    "BurstThrottle",
    "get_throttle",
    "LoggingMiddleware",
]
