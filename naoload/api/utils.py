"""
NaoLoad - API Utilities
=======================

Shared utility functions for the API.
"""

from fastapi import Request


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def format_uptime(seconds: int) -> str:
    """Format seconds into a human-readable string (e.g., '5h 30m 2s')."""
    hours, remainder = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}h {minutes}m {secs}s"


__all__ = ["get_client_ip", "format_uptime"]
