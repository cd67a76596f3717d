"""
NaoLoad - Database Core
=======================

Base database class with connection management and table initialization.
"""

import os
import shutil
import sqlite3
import time
from contextlib import contextmanager
from typing import Generator, Optional

from naoload.core.logger import logger


class DatabaseUnavailableError(Exception):
    """Raised when the database is unhealthy and operations cannot proceed."""
    pass


class DatabaseCore:
    """Base database class with connection management."""

    def __init__(self, db_path: str) -> None:
        """Initialize database connection and create tables if needed."""
        self.db_path = db_path
        self._healthy = True
        self._corruption_reason: Optional[str] = None
        self._init_db()

    @property
    def is_healthy(self) -> bool:
        """Check if database is healthy and operational."""
        return self._healthy

    @property
    def corruption_reason(self) -> Optional[str]:
        """Get the reason for database corruption if unhealthy."""
        return self._corruption_reason

    def _check_integrity(self) -> bool:
        """Check database integrity. Returns True if healthy."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=10.0)
            try:
                row = conn.execute("PRAGMA integrity_check").fetchone()
            finally:
                conn.close()
            return row[0] == "ok"
        except sqlite3.DatabaseError as e:
            logger.error_tree("DB Integrity Check Failed", e)
            return False

    def _backup_corrupted(self) -> None:
        """Backup corrupted database file."""
        backup_path = f"{self.db_path}.corrupted.{int(time.time())}"
        try:
            shutil.copy2(self.db_path, backup_path)
            logger.tree("Corrupted DB Backed Up", [
                ("Backup", backup_path),
            ], emoji="💾")
        except OSError as e:
            logger.error_tree("DB Backup Failed", e)

    @contextmanager
    def _get_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection context manager.

        Commits on success. Database errors are logged and re-raised;
        corruption marks the database unhealthy.

        Raises:
            DatabaseUnavailableError: If the database is unhealthy.
        """
        if not self._healthy:
            logger.tree("Database Unhealthy", [
                ("Status", "Operation rejected"),
                ("Reason", self._corruption_reason or "Unknown"),
            ], emoji="⚠️")
            raise DatabaseUnavailableError(
                f"Database is unavailable: {self._corruption_reason or 'unhealthy'}"
            )

        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=10.0)
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        except sqlite3.DatabaseError as e:
            error_msg = str(e).lower()
            is_corruption = any(x in error_msg for x in [
                "disk i/o error",
                "database disk image is malformed",
                "file is not a database",
                "file is encrypted",
                "unable to open database",
            ])
            if is_corruption:
                self._healthy = False
                self._corruption_reason = str(e)
                logger.error_tree("Database Corruption Detected", e)
                if os.path.exists(self.db_path):
                    self._backup_corrupted()
            else:
                logger.tree("Database Error", [
                    ("Type", type(e).__name__),
                    ("Message", str(e)[:100]),
                ], emoji="⚠️")
            raise
        finally:
            if conn:
                conn.close()

    def _init_db(self) -> None:
        """Initialize database tables."""
        logger.tree("Database Init", [
            ("Path", self.db_path),
            ("Status", "Starting"),
        ], emoji="🗄️")

        # Check integrity on startup
        if os.path.exists(self.db_path) and not self._check_integrity():
            self._corruption_reason = "PRAGMA integrity_check failed on startup"
            logger.tree("DATABASE CORRUPTION DETECTED", [
                ("Path", self.db_path),
                ("Status", "INTEGRITY CHECK FAILED"),
                ("Action", "Creating backup - MANUAL INTERVENTION REQUIRED"),
            ], emoji="🚨")
            self._backup_corrupted()
            self._healthy = False
            return

        try:
            with self._get_conn() as conn:
                cur = conn.cursor()

                # =============================================================
                # Rate Limit Counters
                # =============================================================

                cur.execute("""
                    CREATE TABLE IF NOT EXISTS download_counters (
                        client_address TEXT NOT NULL,
                        media_kind TEXT NOT NULL,
                        day TEXT NOT NULL,
                        count INTEGER NOT NULL DEFAULT 0,
                        updated_at INTEGER NOT NULL,
                        PRIMARY KEY (client_address, media_kind, day)
                    )
                """)

                # =============================================================
                # Usage Logs
                # =============================================================

                cur.execute("""
                    CREATE TABLE IF NOT EXISTS download_logs (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        platform TEXT NOT NULL,
                        format TEXT NOT NULL,
                        created_at INTEGER NOT NULL
                    )
                """)

                cur.execute("""
                    CREATE INDEX IF NOT EXISTS idx_download_logs_created
                    ON download_logs(created_at)
                """)
        except (sqlite3.DatabaseError, DatabaseUnavailableError) as e:
            logger.error_tree("Database Init Failed", e, [
                ("Path", self.db_path),
            ])
            self._healthy = False
            self._corruption_reason = self._corruption_reason or str(e)
            return

        logger.tree("Database Init", [
            ("Path", self.db_path),
            ("Status", "Ready"),
        ], emoji="✅")
