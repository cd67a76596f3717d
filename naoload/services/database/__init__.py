"""
NaoLoad - Database Module
=========================

SQLite store for rate-limit counters and usage logs.

Structure:
    - core.py: Base class with connection management and table init
    - rate_limits.py: Daily per-address download counters
    - downloads.py: Append-only download logs
"""

from typing import Optional

from naoload.core.config import get_config
from .core import DatabaseCore, DatabaseUnavailableError
from .downloads import DownloadLogsMixin
from .rate_limits import CountersMixin


class Database(
    CountersMixin,
    DownloadLogsMixin,
    DatabaseCore,
):
    """
    Complete database class combining all mixins.

    The order matters - DatabaseCore must be last so its __init__ runs.
    """
    pass


_db: Optional[Database] = None


def get_database() -> Optional[Database]:
    """Get the database singleton, or None when no store is configured."""
    global _db
    config = get_config()
    if not config.store_configured:
        return None
    if _db is None:
        _db = Database(config.DATABASE_PATH)
    return _db


__all__ = ["Database", "DatabaseUnavailableError", "get_database"]
