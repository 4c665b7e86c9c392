# src/aliaslookup/cache/models.py — v1
"""Cache-side models: ResourceState, DataResult, RetryMarker."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel


class ResourceState(str, Enum):
    """Freshness of a dataset's cache entry."""

    ABSENT = "absent"
    STALE = "stale"
    FRESH = "fresh"


@dataclass
class DataResult:
    """Records served to the front-end, possibly stale.

    pending is True only while nothing is cached yet and a refresh runs.
    """

    records: list[Any] = field(default_factory=list)
    pending: bool = False


class RetryMarker(BaseModel):
    """Records that an attempt for key failed at failed_at."""

    key: str
    failed_at: datetime
    reason: str = ""
