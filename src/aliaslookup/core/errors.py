# src/aliaslookup/core/errors.py — v1
"""Error taxonomy.

Errors fall in three groups:

* fatal to the invocation: ``CacheCorruptedError``, ``LaunchError``;
* fatal to a refresh job only: ``FetchError``, ``RecordParseError``;
* recoverable, recorded by the icon retry guard: ``NoIconFoundError``.
"""

from __future__ import annotations


class AliasLookupError(Exception):
    """Base class for all aliaslookup errors."""


class CacheCorruptedError(AliasLookupError):
    """A cache entry exists but cannot be deserialized."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Cache entry '{key}' is corrupted: {reason}")


class LaunchError(AliasLookupError):
    """The background refresh job could not be spawned."""

    def __init__(self, tag: str, reason: str):
        self.tag = tag
        self.reason = reason
        super().__init__(f"Cannot start background job '{tag}': {reason}")


class FetchError(AliasLookupError):
    """Network retrieval of a remote dataset or asset failed."""


class RecordParseError(AliasLookupError):
    """A line of the authoritative dataset is structurally invalid."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Invalid record on line {line_number}: {reason}")


class NoIconFoundError(AliasLookupError):
    """The target page declares no usable icon."""
