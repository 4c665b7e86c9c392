# src/aliaslookup/cache/base_cache_store.py — v1
"""Abstract key/value store with per-key write timestamps.

The store records when each key was last written; it never decides
whether an entry is fresh. Freshness belongs to the refresh coordinator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class BaseDataStore(ABC):
    """Unified interface for durable cache backends."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True when an entry is stored under key."""

    @abstractmethod
    def stored_at(self, key: str) -> datetime | None:
        """Return the last write time of key (UTC), None when missing."""

    @abstractmethod
    def load(self, key: str) -> bytes:
        """Return the payload stored under key.

        Raises:
            KeyError: If no entry exists.
        """

    @abstractmethod
    def store(self, key: str, payload: bytes) -> None:
        """Replace the payload of key. Readers see the old or the new value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; missing keys are ignored."""

    def close(self) -> None:
        """Release backend resources. No-op for stores that hold none."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def age(self, key: str) -> timedelta | None:
        """Age of the entry, None when missing."""
        written = self.stored_at(key)
        if written is None:
            return None
        return self.now() - written

    def expired(self, key: str, max_age: timedelta) -> bool:
        """True when key is missing or older than max_age."""
        age = self.age(key)
        return age is None or age > max_age
