# src/aliaslookup/cache/cache_factory.py — v1
"""Factory for data store instantiation."""

from __future__ import annotations

from pathlib import Path

from aliaslookup.cache.base_cache_store import BaseDataStore
from aliaslookup.config.settings import Settings


def create_data_store(root: Path | str, settings: Settings | None = None) -> BaseDataStore:
    """Instantiate the configured store backend rooted at root.

    Args:
        root: Directory owning the store (data dir or cache dir).
        settings: Application settings. Defaults to the file backend.

    Returns:
        Configured BaseDataStore implementation.
    """
    backend = "file" if settings is None else settings.cache_backend

    if backend == "file":
        from aliaslookup.cache.file_store import FileDataStore
        return FileDataStore(root)

    if backend == "sqlite":
        from aliaslookup.cache.sqlite_store import SqliteDataStore
        return SqliteDataStore(Path(root).expanduser() / "aliaslookup.db")

    raise ValueError(f"Unsupported cache backend: {backend!r}")
