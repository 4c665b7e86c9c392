# src/aliaslookup/icons/prefetcher.py — v1
"""Best-effort icon prefetch over the full set of links."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import httpx

from aliaslookup.core.models import LinkRecord
from aliaslookup.icons.backoff import IconRetryGuard
from aliaslookup.icons.favicon import download_icon
from aliaslookup.icons.icon_cache import IconCache

logger = logging.getLogger(__name__)


@dataclass
class PrefetchReport:
    """Outcome of one prefetch pass."""

    downloaded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class IconPrefetcher:
    """Downloads missing icons, honouring the retry guard."""

    def __init__(self, icons: IconCache, guard: IconRetryGuard) -> None:
        self._icons = icons
        self._guard = guard

    def wants_icon(self, link: LinkRecord) -> bool:
        """True when link has no icon and no recent failed attempt."""
        if self._icons.has_icon(link):
            return False
        return self._guard.should_attempt(link.short)

    def needs_icon_download(self, links: Sequence[LinkRecord]) -> bool:
        return any(self.wants_icon(link) for link in links)

    async def prefetch(
        self, client: httpx.AsyncClient, links: Sequence[LinkRecord]
    ) -> PrefetchReport:
        """Try each eligible link once; failures are recorded, never raised."""
        logger.info("Downloading icons")
        report = PrefetchReport()

        for link in links:
            if not self.wants_icon(link):
                report.skipped.append(link.short)
                continue

            try:
                await download_icon(client, link, self._icons)
            except Exception as e:
                logger.warning("Error downloading icon for %s: %s", link.short, e)
                self._guard.record_failure(link.short, reason=str(e))
                report.failed.append(link.short)
            else:
                report.downloaded.append(link.short)

        logger.info(
            "Icons: %d downloaded, %d failed, %d skipped",
            len(report.downloaded), len(report.failed), len(report.skipped),
        )
        return report
