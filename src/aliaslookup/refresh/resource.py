# src/aliaslookup/refresh/resource.py — v1
"""Refreshable cache resources: one dataset, its key, window and fetcher."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import timedelta

from pydantic import BaseModel

from aliaslookup.config.settings import Settings
from aliaslookup.fetch.base_fetcher import BaseFetcher
from aliaslookup.fetch.keys_fetcher import KeysFetcher
from aliaslookup.fetch.links_fetcher import LinksFetcher

LINKS_CACHE_KEY = "links"
KEYS_CACHE_KEY = "pubkey-cache"


@dataclass(frozen=True)
class RefreshableResource:
    """A dataset served from cache and refreshed by a background job."""

    name: str
    cache_key: str
    max_age: timedelta
    fetcher: BaseFetcher
    prefetch_icons: bool = False

    @property
    def model(self) -> type[BaseModel]:
        return self.fetcher.model

    @property
    def job_tag(self) -> str:
        """Single-flight tag of this resource's refresh job."""
        return f"download-{self.name}"

    def refresh_command(self) -> list[str]:
        """Re-invoke this program in download mode for this resource."""
        return [sys.executable, "-m", "aliaslookup", self.name, "--download"]


def build_resources(settings: Settings) -> dict[str, RefreshableResource]:
    """Return the configured resources keyed by name."""
    return {
        "links": RefreshableResource(
            name="links",
            cache_key=LINKS_CACHE_KEY,
            max_age=settings.links_max_age,
            fetcher=LinksFetcher(settings.links_url),
            prefetch_icons=True,
        ),
        "keys": RefreshableResource(
            name="keys",
            cache_key=KEYS_CACHE_KEY,
            max_age=settings.keys_max_age,
            fetcher=KeysFetcher(settings.keys_url),
        ),
    }
