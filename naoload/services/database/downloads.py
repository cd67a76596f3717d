"""
NaoLoad - Database Downloads Mixin
==================================

Append-only download log operations.
"""

import time
from typing import Any, Dict, List, Optional


class DownloadLogsMixin:
    """Mixin for download log database operations."""

    def add_download_log(self, platform: str, fmt: str, created_at: Optional[int] = None) -> None:
        """
        Append a successful download to the log.

        Args:
            platform: Platform name (tiktok, youtube, etc.)
            fmt: File format (mp4, mp3)
            created_at: Unix timestamp, defaults to now
        """
        with self._get_conn() as conn:
            cur = conn.cursor()
            cur.execute("""
                INSERT INTO download_logs (platform, format, created_at)
                VALUES (?, ?, ?)
            """, (platform.lower(), fmt.lower(), created_at if created_at is not None else int(time.time())))

    def get_recent_download_logs(self, limit: int = 50) -> List[Dict[str, Any]]:
        """
        Get the newest log entries.

        Returns:
            List of dicts with id, platform, format, created_at (newest first)
        """
        with self._get_conn() as conn:
            cur = conn.cursor()
            cur.execute("""
                SELECT id, platform, format, created_at
                FROM download_logs
                ORDER BY created_at DESC, id DESC
                LIMIT ?
            """, (limit,))
            return [dict(row) for row in cur.fetchall()]

    def count_download_logs(self) -> int:
        """Get the total number of logged downloads."""
        with self._get_conn() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) AS total FROM download_logs")
            return cur.fetchone()["total"]
