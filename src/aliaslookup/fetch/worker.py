# src/aliaslookup/fetch/worker.py — v1
"""Refresh job body, run only inside the detached background process."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from aliaslookup.cache.serializer import dump_records
from aliaslookup.core.errors import AliasLookupError
from aliaslookup.icons.backoff import IconRetryGuard
from aliaslookup.icons.icon_cache import IconCache
from aliaslookup.icons.prefetcher import IconPrefetcher
from aliaslookup.refresh.context import WorkflowContext
from aliaslookup.refresh.resource import RefreshableResource

logger = logging.getLogger(__name__)


def create_http_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """HTTP client used by refresh jobs; httpx default timeouts apply."""
    return httpx.AsyncClient(follow_redirects=True, transport=transport)


def create_prefetcher(context: WorkflowContext) -> IconPrefetcher:
    settings = context.settings
    return IconPrefetcher(
        IconCache(settings.icons_path),
        IconRetryGuard(context.marker_store, cooldown=settings.icon_retry_cooldown),
    )


async def download_and_persist(
    resource: RefreshableResource,
    context: WorkflowContext,
    client: httpx.AsyncClient | None = None,
) -> list[Any]:
    """Fetch resource and overwrite its cache entry.

    Nothing is written unless the whole dataset parsed. A client is
    created for the call when none is given.

    Raises:
        FetchError: On network failure.
        RecordParseError: On a malformed record.
        OSError: If the cache entry cannot be written.
    """
    if client is None:
        async with create_http_client() as own_client:
            records = await resource.fetcher.fetch(own_client)
    else:
        records = await resource.fetcher.fetch(client)
    context.data_store.store(resource.cache_key, dump_records(records))
    logger.info("Persisted %d %s to cache", len(records), resource.name)
    return records


async def run_refresh_job(
    resource: RefreshableResource,
    context: WorkflowContext,
    transport: httpx.AsyncBaseTransport | None = None,
    prefetcher: IconPrefetcher | None = None,
) -> int:
    """Refresh resource, then prefetch icons when it serves links.

    Returns:
        Process exit code: 0 on success, 1 if the refresh failed.
    """
    logger.info("Background job %s started", resource.job_tag)

    async with create_http_client(transport) as client:
        try:
            records = await download_and_persist(resource, context, client)
        except (AliasLookupError, OSError) as e:
            logger.error("Error downloading %s: %s", resource.name, e)
            return 1

        if resource.prefetch_icons:
            prefetcher = prefetcher or create_prefetcher(context)
            if prefetcher.needs_icon_download(records):
                await prefetcher.prefetch(client, records)

    return 0
