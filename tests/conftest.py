# tests/conftest.py — v1
"""Shared test fixtures for unit and integration tests.

Provides settings rooted in tmp_path, stores, a fake job launcher and
sample records. No network or subprocess access: HTTP goes through
httpx.MockTransport and jobs are recorded by FakeLauncher.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from aliaslookup.cache.file_store import FileDataStore
from aliaslookup.config.settings import Settings
from aliaslookup.core.models import KeyRecord, LinkRecord
from aliaslookup.jobs.launcher import BaseJobLauncher
from aliaslookup.refresh.context import WorkflowContext


class FakeLauncher(BaseJobLauncher):
    """Records launches; a launched tag stays running until finish()."""

    def __init__(self) -> None:
        self.launches: list[tuple[str, list[str]]] = []
        self.running: set[str] = set()

    def is_running(self, tag: str) -> bool:
        return tag in self.running

    def run_detached(self, tag: str, argv: Sequence[str]) -> bool:
        if tag in self.running:
            return False
        self.launches.append((tag, list(argv)))
        self.running.add(tag)
        return True

    def finish(self, tag: str) -> None:
        self.running.discard(tag)


def make_public_key(comment: str = "") -> str:
    """Generate a fresh ed25519 authorized_keys line."""
    key = ed25519.Ed25519PrivateKey.generate().public_key()
    line = key.public_bytes(
        serialization.Encoding.OpenSSH, serialization.PublicFormat.OpenSSH
    ).decode("ascii")
    return f"{line} {comment}" if comment else line


# === FIXTURES: Settings and context ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        cache_dir=tmp_path / "cache",
        links_url="http://go.test/.export",
        keys_url="https://keys.test/authorized_keys",
    )


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def context(settings: Settings, fake_launcher: FakeLauncher) -> WorkflowContext:
    return WorkflowContext(
        settings=settings,
        data_store=FileDataStore(settings.data_path),
        marker_store=FileDataStore(settings.cache_path),
        launcher=fake_launcher,
    )


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_links() -> list[LinkRecord]:
    return [
        LinkRecord(short="docs", long="https://docs.example.com/", owner="ana@example.com"),
        LinkRecord(short="wiki", long="https://wiki.example.com/home", owner="bo@example.com"),
        LinkRecord(
            short="cal",
            long="https://calendar.example.com/",
            owner="ana@example.com",
            created=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def sample_keys() -> list[KeyRecord]:
    return [
        KeyRecord(key_line="ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIA laptop", comment="laptop"),
        KeyRecord(key_line="ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIB desktop", comment="desktop"),
    ]


@pytest.fixture
def make_key():
    """Factory for valid authorized_keys lines."""
    return make_public_key
