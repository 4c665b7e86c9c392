# src/aliaslookup/refresh/context.py — v1
"""Per-invocation context handed to every component.

Built once per process from Settings; holds the data store (datasets),
the marker store (retry markers), the job launcher and the rerun hint.
"""

from __future__ import annotations

from dataclasses import dataclass

from aliaslookup.cache.base_cache_store import BaseDataStore
from aliaslookup.cache.cache_factory import create_data_store
from aliaslookup.config.settings import Settings
from aliaslookup.jobs.launcher import BaseJobLauncher, ProcessLauncher


@dataclass
class WorkflowContext:
    settings: Settings
    data_store: BaseDataStore
    marker_store: BaseDataStore
    launcher: BaseJobLauncher
    rerun: float | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> WorkflowContext:
        return cls(
            settings=settings,
            data_store=create_data_store(settings.data_path, settings),
            marker_store=create_data_store(settings.cache_path, settings),
            launcher=ProcessLauncher(
                settings.jobs_path, grace_period=settings.launch_grace_period
            ),
        )

    def close(self) -> None:
        """Close both stores."""
        self.data_store.close()
        self.marker_store.close()

    def request_rerun(self, delay: float) -> None:
        """Ask the launcher to run the query again after delay seconds."""
        if self.rerun is None or delay < self.rerun:
            self.rerun = delay
