"""
NaoLoad - Usage Logging
=======================

Best-effort download logging and the admin statistics aggregate.
"""

import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from naoload.core.constants import NO_TOP_PLATFORM, RECENT_LOGS_LIMIT
from naoload.core.logger import logger
from naoload.services.database import Database, DatabaseUnavailableError, get_database


# =============================================================================
# Stats
# =============================================================================

@dataclass
class DownloadStats:
    """Aggregate over logged downloads."""
    total: int = 0
    today: int = 0
    by_platform: Dict[str, int] = field(default_factory=dict)
    top_platform: str = NO_TOP_PLATFORM

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "today": self.today,
            "topPlatform": self.top_platform,
            "byPlatform": dict(self.by_platform),
        }


def _midnight(now: datetime) -> float:
    return now.replace(hour=0, minute=0, second=0, microsecond=0).timestamp()


def compute_stats(
    logs: Sequence[Mapping[str, Any]],
    total: Optional[int] = None,
    now: Optional[datetime] = None,
) -> DownloadStats:
    """
    Aggregate log entries into totals and a per-platform histogram.

    Args:
        logs: Entries with platform and created_at (unix seconds)
        total: Exact store count, when known
        now: Reference time for "today" (server-local)
    """
    start_of_day = _midnight(now or datetime.now())

    by_platform: Dict[str, int] = {}
    today = 0
    for entry in logs:
        platform = entry.get("platform") or "unknown"
        by_platform[platform] = by_platform.get(platform, 0) + 1
        if (entry.get("created_at") or 0) >= start_of_day:
            today += 1

    # Strict > keeps the first-seen platform on ties
    top_platform = NO_TOP_PLATFORM
    best = 0
    for platform, count in by_platform.items():
        if count > best:
            top_platform, best = platform, count

    return DownloadStats(
        total=total if total is not None else len(logs),
        today=today,
        by_platform=by_platform,
        top_platform=top_platform,
    )


# =============================================================================
# Usage Logger
# =============================================================================

class UsageLogger:
    """Append-only usage log. Writes never raise."""

    def __init__(self, db: Optional[Database]) -> None:
        self.db = db

    @property
    def enabled(self) -> bool:
        return self.db is not None

    def record(self, platform: str, fmt: str) -> None:
        if self.db is None:
            return
        try:
            self.db.add_download_log(platform, fmt)
        except (sqlite3.DatabaseError, DatabaseUnavailableError) as e:
            logger.error_tree("Usage Log Failed", e, [
                ("Platform", platform),
                ("Format", fmt),
            ])
            return

        logger.tree("Download Logged", [
            ("Platform", platform),
            ("Format", fmt),
        ], emoji="📝")

    def recent(self, limit: int = RECENT_LOGS_LIMIT) -> List[Dict[str, Any]]:
        if self.db is None:
            return []
        try:
            return self.db.get_recent_download_logs(limit)
        except (sqlite3.DatabaseError, DatabaseUnavailableError) as e:
            logger.error_tree("Usage Logs Read Failed", e, [
                ("Limit", str(limit)),
            ])
            return []

    def total(self) -> int:
        if self.db is None:
            return 0
        try:
            return self.db.count_download_logs()
        except (sqlite3.DatabaseError, DatabaseUnavailableError) as e:
            logger.error_tree("Usage Count Failed", e)
            return 0


_usage: Optional[UsageLogger] = None


def get_usage_logger() -> UsageLogger:
    """Get or create the usage logger singleton."""
    global _usage
    if _usage is None:
        _usage = UsageLogger(get_database())
    return _usage


__all__ = [
    "DownloadStats",
    "UsageLogger",
    "compute_stats",
    "get_usage_logger",
]
