# src/aliaslookup/icons/backoff.py — v1
"""Retry suppression for icon downloads.

A failed download leaves a RetryMarker in the marker store. While the
marker is younger than the cooldown, no new attempt is made for that key.
Markers are never deleted; age is checked when they are read.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from pydantic import ValidationError

from aliaslookup.cache.base_cache_store import BaseDataStore
from aliaslookup.cache.models import RetryMarker

logger = logging.getLogger(__name__)

MARKER_PREFIX = "icon-download-"


class IconRetryGuard:
    """Decides whether an icon download may be attempted for a key."""

    def __init__(
        self,
        marker_store: BaseDataStore,
        cooldown: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = marker_store
        self._cooldown = cooldown
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @staticmethod
    def marker_key(key: str) -> str:
        return f"{MARKER_PREFIX}{key}"

    def last_failure(self, key: str) -> RetryMarker | None:
        marker_key = self.marker_key(key)
        try:
            payload = self._store.load(marker_key)
        except KeyError:
            return None
        try:
            return RetryMarker.model_validate_json(payload)
        except ValidationError:
            logger.warning("Ignoring unreadable retry marker %s", marker_key)
            return None

    def should_attempt(self, key: str) -> bool:
        marker = self.last_failure(key)
        if marker is None:
            return True
        return self._clock() - marker.failed_at >= self._cooldown

    def record_failure(self, key: str, reason: str = "") -> RetryMarker:
        marker = RetryMarker(key=key, failed_at=self._clock(), reason=reason)
        self._store.store(self.marker_key(key), marker.model_dump_json().encode("utf-8"))
        return marker
