# src/todolist/tasks/bootstrap_state.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .task_errors import StorageError, StoreOpenError

logger = logging.getLogger(__name__)

IMPORTED_KEY = "has_imported_from_remote"


class BootstrapState:
    """
    Persisted "has imported from remote source" flag.

    Lives in a small key/value table next to the tasks table, so it travels
    with the task database instead of being a hidden process-wide global.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS app_settings (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                    """
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            logger.critical("Cannot open settings table db=%s: %s", self._db_path, e)
            raise StoreOpenError(f"cannot open settings at {self._db_path}") from e

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def is_imported(self) -> bool:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT value FROM app_settings WHERE key = ?", (IMPORTED_KEY,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error:
            # Unknown is treated as "not yet"; the import itself dedups by title.
            logger.exception("Failed to read bootstrap flag")
            return False
        return row is not None and row[0] == "1"

    def mark_imported(self) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO app_settings(key, value) VALUES (?, '1')
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (IMPORTED_KEY,),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.exception("Failed to persist bootstrap flag")
            raise StorageError("mark_imported failed") from e
        logger.info("Bootstrap import flag set")
