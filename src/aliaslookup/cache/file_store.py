# src/aliaslookup/cache/file_store.py — v1
"""File-based data store (default CACHE_BACKEND=file).

One file per key under the store root. The file's mtime is the write
timestamp. Writes go to a temporary file in the same directory and are
moved into place with os.replace, so readers never see a partial payload.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from aliaslookup.cache.base_cache_store import BaseDataStore

logger = logging.getLogger(__name__)


class FileDataStore(BaseDataStore):
    """Durable store keeping each entry in its own file."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def exists(self, key: str) -> bool:
        return self.entry_path(key).is_file()

    def stored_at(self, key: str) -> datetime | None:
        try:
            mtime = self.entry_path(key).stat().st_mtime
        except FileNotFoundError:
            return None
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def load(self, key: str) -> bytes:
        try:
            return self.entry_path(key).read_bytes()
        except FileNotFoundError:
            raise KeyError(key) from None

    def store(self, key: str, payload: bytes) -> None:
        path = self.entry_path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Stored %d bytes under %s", len(payload), key)

    def delete(self, key: str) -> None:
        self.entry_path(key).unlink(missing_ok=True)

    def entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        safe_key = key.replace("/", "_").replace("\\", "_")
        if safe_key.startswith("."):
            safe_key = "_" + safe_key[1:]
        return self._root / safe_key
