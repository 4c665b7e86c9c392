# src/aliaslookup/cache/sqlite_store.py — v1
"""SQLite-based data store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3. Each write is an upsert inside its own transaction;
WAL mode lets readers in other processes see the previous row until the
writer commits. One connection is shared by all threads of a process and
every statement runs under the store's lock.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from aliaslookup.cache.base_cache_store import BaseDataStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS entries (
    key TEXT PRIMARY KEY,
    payload BLOB NOT NULL,
    stored_at TEXT NOT NULL
);
"""


class SqliteDataStore(BaseDataStore):
    """SQLite-backed durable store."""

    def __init__(
        self,
        db_path: Path | str,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            str(self._db_path), timeout=5.0, check_same_thread=False
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return super().now()

    def _fetchone(self, sql: str, params: tuple[Any, ...]) -> tuple[Any, ...] | None:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    def _write(self, sql: str, params: tuple[Any, ...]) -> None:
        with self._lock, self._conn:
            self._conn.execute(sql, params)

    def exists(self, key: str) -> bool:
        return self._fetchone("SELECT 1 FROM entries WHERE key = ?", (key,)) is not None

    def stored_at(self, key: str) -> datetime | None:
        row = self._fetchone("SELECT stored_at FROM entries WHERE key = ?", (key,))
        if row is None:
            return None
        written = datetime.fromisoformat(row[0])
        if written.tzinfo is None:
            written = written.replace(tzinfo=timezone.utc)
        return written

    def load(self, key: str) -> bytes:
        row = self._fetchone("SELECT payload FROM entries WHERE key = ?", (key,))
        if row is None:
            raise KeyError(key)
        return bytes(row[0])

    def store(self, key: str, payload: bytes) -> None:
        self._write(
            """INSERT OR REPLACE INTO entries (key, payload, stored_at)
               VALUES (?, ?, ?)""",
            (key, sqlite3.Binary(payload), self.now().isoformat()),
        )
        logger.debug("Stored %d bytes under %s", len(payload), key)

    def delete(self, key: str) -> None:
        self._write("DELETE FROM entries WHERE key = ?", (key,))

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()
