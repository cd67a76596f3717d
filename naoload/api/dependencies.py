"""
NaoLoad - API Dependencies
==========================

FastAPI dependency injection utilities.
"""

import hmac
from typing import Optional

from naoload.api.errors import unauthorized
from naoload.core.config import get_config
from naoload.core.logger import logger
from naoload.services.rate_limiter import DownloadRateLimiter, get_download_limiter
from naoload.services.resolver import ResolverService, get_resolver
from naoload.services.usage import UsageLogger, get_usage_logger


# =============================================================================
# Services
# =============================================================================

def get_resolver_service() -> ResolverService:
    """Get the resolver used by the download route."""
    return get_resolver()


def get_limiter() -> DownloadRateLimiter:
    """Get the daily download limiter."""
    return get_download_limiter()


def get_usage() -> UsageLogger:
    """Get the usage logger."""
    return get_usage_logger()


# =============================================================================
# Admin Authentication
# =============================================================================

def get_admin_password() -> str:
    """Get the configured admin password (empty when unset)."""
    return get_config().ADMIN_PASSWORD


def verify_admin_password(password: Optional[str], expected: str) -> None:
    """
    Compare a submitted admin password against the configured one.

    Raises 401 on mismatch, and always when no password is configured.
    """
    if not expected:
        logger.tree("Admin Auth Rejected", [
            ("Reason", "Admin password not configured"),
        ], emoji="🔐")
        raise unauthorized()

    # Use constant-time comparison to prevent timing attacks
    if not password or not hmac.compare_digest(password.encode(), expected.encode()):
        raise unauthorized()


__all__ = [
    "get_resolver_service",
    "get_limiter",
    "get_usage",
    "get_admin_password",
    "verify_admin_password",
]
