# src/task_central/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from ..core.ports import SaveResult

logger = logging.getLogger(__name__)

STORAGE_ERROR = "Storage error"
REMOVE_ERROR = "Remove error"


class SqliteKeyValueStorage:
    """
    SQLite-backed key-value store (JSON values).

    Failure policy:
    - save/remove catch everything and report SaveResult(success=False)
    - load is lenient: missing, unreadable or corrupt values are returned as None

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_keys()
        except Exception:
            total = -1
        logger.info("SqliteKeyValueStorage ready db=%s keys=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def count_keys(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM kv").fetchone()
            return int(n)
        finally:
            conn.close()

    def save(self, key: str, value: Any) -> SaveResult:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            logger.exception("Failed to JSON-encode value for key=%s", key)
            return SaveResult.failed(STORAGE_ERROR)

        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to save key=%s db=%s", key, self._db_path)
            return SaveResult.failed(STORAGE_ERROR)

        logger.debug("Saved key=%s bytes=%d", key, len(payload))
        return SaveResult.ok()

    def load(self, key: str) -> Any | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except Exception:
            logger.warning("Failed to read key=%s db=%s; treating as absent.", key, self._db_path)
            return None

        if row is None:
            return None

        try:
            return json.loads(row["value"])
        except (TypeError, ValueError, RecursionError):
            logger.warning("Corrupt value for key=%s; treating as absent.", key)
            return None

    def remove(self, key: str) -> SaveResult:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except Exception:
            logger.exception("Failed to remove key=%s db=%s", key, self._db_path)
            return SaveResult.failed(REMOVE_ERROR)
        return SaveResult.ok()

