"""
NaoLoad - Daily Download Limiter
================================

Per-address, per-media-kind daily download quotas backed by SQLite.

Checks read the counter; consumes increment it atomically. Storage
failures fail open so an outage never locks users out.
"""

import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from naoload.core.config import get_config
from naoload.core.logger import logger
from naoload.services.database import Database, DatabaseUnavailableError, get_database


# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class RateLimitStatus:
    """Outcome of a limit check."""
    allowed: bool
    remaining: int
    limit: int


def today_key(day: Optional[date] = None) -> str:
    """Server-local calendar date as YYYY-MM-DD."""
    return (day or date.today()).isoformat()


# =============================================================================
# Limiter
# =============================================================================

class DownloadRateLimiter:
    """Daily quota enforcement keyed by (address, kind, day)."""

    def __init__(self, db: Optional[Database], limits: Dict[str, int]) -> None:
        self.db = db
        self.limits = dict(limits)

    def limit_for(self, kind: str) -> int:
        if kind not in self.limits:
            raise ValueError(f"Unknown media kind: {kind}")
        return self.limits[kind]

    def check(self, address: str, kind: str, day: Optional[str] = None) -> RateLimitStatus:
        """Read-only check; allowed while the count is under the limit."""
        limit = self.limit_for(kind)
        if self.db is None:
            return RateLimitStatus(allowed=True, remaining=limit, limit=limit)

        day = day or today_key()
        try:
            count = self.db.get_download_count(address, kind, day)
        except (sqlite3.DatabaseError, DatabaseUnavailableError) as e:
            logger.error_tree("Rate Limit Check Failed (fail-open)", e, [
                ("Address", address),
                ("Type", kind),
            ])
            return RateLimitStatus(allowed=True, remaining=limit, limit=limit)

        return RateLimitStatus(
            allowed=count < limit,
            remaining=max(0, limit - count),
            limit=limit,
        )

    def consume(self, address: str, kind: str, day: Optional[str] = None) -> int:
        """
        Record one download.

        Returns:
            Remaining downloads after the increment
        """
        limit = self.limit_for(kind)
        if self.db is None:
            return limit

        day = day or today_key()
        try:
            count = self.db.increment_download_count(address, kind, day)
        except (sqlite3.DatabaseError, DatabaseUnavailableError) as e:
            logger.error_tree("Rate Limit Consume Failed", e, [
                ("Address", address),
                ("Type", kind),
            ])
            return limit

        return max(0, limit - count)

    def check_and_consume(self, address: str, kind: str, day: Optional[str] = None) -> RateLimitStatus:
        """Check, and consume one slot when allowed."""
        status = self.check(address, kind, day)
        if not status.allowed:
            return status
        remaining = self.consume(address, kind, day)
        return RateLimitStatus(allowed=True, remaining=remaining, limit=status.limit)


# =============================================================================
# Singleton
# =============================================================================

_limiter: Optional[DownloadRateLimiter] = None


def get_download_limiter() -> DownloadRateLimiter:
    """Get or create the daily limiter from configuration."""
    global _limiter
    if _limiter is None:
        _limiter = DownloadRateLimiter(get_database(), get_config().daily_limits)
    return _limiter


__all__ = [
    "DownloadRateLimiter",
    "RateLimitStatus",
    "get_download_limiter",
    "today_key",
]
