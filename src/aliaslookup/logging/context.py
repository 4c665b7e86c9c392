# src/aliaslookup/logging/context.py — v1
"""Contextual logging support: attach resource and job to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set once per invocation by the CLI, read by the formatters.
_resource: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "resource", default=None
)
_job: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    resource: str | None = None
    job: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(resource=_resource.get(), job=_job.get())


def set_resource_context(resource: str, job: str | None = None) -> None:
    """Set the resource being served and, in a worker, the job tag."""
    _resource.set(resource)
    _job.set(job)


def clear_context() -> None:
    """Reset all context variables."""
    _resource.set(None)
    _job.set(None)
