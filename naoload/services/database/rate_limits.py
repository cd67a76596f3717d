"""
NaoLoad - Database Counters Mixin
=================================

Daily per-address download counters.
"""

import time

from naoload.core.logger import log


class CountersMixin:
    """Mixin for rate-limit counter database operations."""

    def get_download_count(self, client_address: str, media_kind: str, day: str) -> int:
        """Get how many downloads an address made for a kind on a day."""
        with self._get_conn() as conn:
            cur = conn.cursor()
            cur.execute("""
                SELECT count FROM download_counters
                WHERE client_address = ? AND media_kind = ? AND day = ?
            """, (client_address, media_kind, day))
            row = cur.fetchone()
            return row["count"] if row else 0

    def increment_download_count(self, client_address: str, media_kind: str, day: str) -> int:
        """
        Atomically add one to a counter, creating it on first use.

        Returns:
            The count after the increment
        """
        now = int(time.time())

        with self._get_conn() as conn:
            cur = conn.cursor()
            cur.execute("""
                INSERT INTO download_counters (client_address, media_kind, day, count, updated_at)
                VALUES (?, ?, ?, 1, ?)
                ON CONFLICT(client_address, media_kind, day) DO UPDATE SET
                    count = count + 1,
                    updated_at = ?
            """, (client_address, media_kind, day, now, now))
            cur.execute("""
                SELECT count FROM download_counters
                WHERE client_address = ? AND media_kind = ? AND day = ?
            """, (client_address, media_kind, day))
            count = cur.fetchone()["count"]

        log.tree("Download Count Recorded", [
            ("Address", client_address),
            ("Type", media_kind),
            ("Day", day),
            ("Count", str(count)),
        ], emoji="📥")
        return count
