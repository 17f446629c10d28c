import logging
import sqlite3
from typing import Mapping

from ..errors import StorePlatformError
from ..settings import SETTINGS_KEYS
from .base import SettingsStore

logger = logging.getLogger(__name__)


class SqliteSettingsStore(SettingsStore):
    """Key/value settings persisted in the ``policy_settings`` table."""

    def __init__(self, conn: sqlite3.Connection, keys: tuple[str, ...] = SETTINGS_KEYS):
        self._conn = conn
        self._keys = keys

    def get_all(self) -> dict[str, str]:
        try:
            rows = self._conn.execute("SELECT key, value FROM policy_settings").fetchall()
        except sqlite3.Error as exc:
            raise StorePlatformError("Failed to read settings") from exc
        return {str(row[0]): str(row[1] or "") for row in rows}

    def set_all(self, values: Mapping[str, str]) -> None:
        # Wholesale replace: managed keys not given a value are removed.
        placeholders = ", ".join("?" for _ in self._keys)
        rows = [
            (key, str(value).strip())
            for key, value in values.items()
            if value is not None and str(value).strip()
        ]
        try:
            self._conn.execute(
                f"DELETE FROM policy_settings WHERE key IN ({placeholders})",
                self._keys,
            )
            self._conn.executemany(
                """
                INSERT INTO policy_settings (key, value, updated_at)
                VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET
                  value = excluded.value,
                  updated_at = excluded.updated_at
                """,
                rows,
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StorePlatformError("Failed to write settings") from exc
        logger.info("Settings stored (%d keys)", len(rows))
