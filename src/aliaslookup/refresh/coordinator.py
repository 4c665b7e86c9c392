# src/aliaslookup/refresh/coordinator.py — v1
"""Refresh coordination: serve cached records, refresh in the background.

State of a resource's cache entry:

    ABSENT -> (refresh launched) -> FRESH <-> STALE

ABSENT returns no records with ``pending=True``. STALE returns the stored
records unchanged. Both launch the refresh job unless it already runs,
and ask the caller to rerun shortly. FRESH returns the stored records
without side effects. A forced refresh behaves like STALE.
"""

from __future__ import annotations

import logging
import threading

from aliaslookup.cache.models import DataResult, ResourceState
from aliaslookup.cache.serializer import load_records
from aliaslookup.refresh.context import WorkflowContext
from aliaslookup.refresh.resource import RefreshableResource

logger = logging.getLogger(__name__)


class RefreshCoordinator:
    """Sole authority on freshness decisions for refreshable resources."""

    def __init__(self, context: WorkflowContext) -> None:
        self._ctx = context
        self._launch_lock = threading.Lock()

    def state(self, resource: RefreshableResource) -> ResourceState:
        store = self._ctx.data_store
        if not store.exists(resource.cache_key):
            return ResourceState.ABSENT
        if store.expired(resource.cache_key, resource.max_age):
            return ResourceState.STALE
        return ResourceState.FRESH

    def get_data(self, resource: RefreshableResource, force: bool = False) -> DataResult:
        """Return cached records, triggering a background refresh if needed.

        Raises:
            CacheCorruptedError: If the stored entry cannot be deserialized.
            LaunchError: If the refresh job cannot be spawned.
        """
        state = self.state(resource)
        logger.debug("Cache entry %s is %s", resource.cache_key, state.value)

        if state is ResourceState.ABSENT:
            logger.info("Empty cache for %s, downloading", resource.name)
            self._background_refresh(resource)
            return DataResult(records=[], pending=True)

        if state is ResourceState.STALE:
            logger.info("Cache for %s expired, refreshing in background", resource.name)
            self._background_refresh(resource)
        elif force:
            logger.info("Forcing refresh of %s", resource.name)
            self._background_refresh(resource)

        try:
            payload = self._ctx.data_store.load(resource.cache_key)
        except KeyError:
            # Deleted between the existence check and the read.
            self._background_refresh(resource)
            return DataResult(records=[], pending=True)

        return DataResult(records=load_records(resource.cache_key, payload, resource.model))

    def is_refreshing(self, resource: RefreshableResource) -> bool:
        return self._ctx.launcher.is_running(resource.job_tag)

    def launch_if_not_running(self, resource: RefreshableResource) -> bool:
        """Start the refresh job of resource unless one is running.

        Returns:
            True if a job was started by this call.
        """
        launcher = self._ctx.launcher
        with self._launch_lock:
            if launcher.is_running(resource.job_tag):
                logger.info("Background job %s already running", resource.job_tag)
                return False
            logger.info("Starting background job %s", resource.job_tag)
            return launcher.run_detached(resource.job_tag, resource.refresh_command())

    def _background_refresh(self, resource: RefreshableResource) -> None:
        self._ctx.request_rerun(self._ctx.settings.rerun_delay)
        self.launch_if_not_running(resource)
