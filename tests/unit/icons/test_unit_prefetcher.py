# tests/unit/icons/test_unit_prefetcher.py — v1
"""Tests for icons/prefetcher.py: best-effort batch icon download."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from aliaslookup.cache.file_store import FileDataStore
from aliaslookup.core.models import LinkRecord
from aliaslookup.icons.backoff import IconRetryGuard
from aliaslookup.icons.icon_cache import IconCache
from aliaslookup.icons.prefetcher import IconPrefetcher

T0 = datetime(2025, 5, 1, tzinfo=timezone.utc)


@pytest.fixture
def icons(tmp_path):
    return IconCache(tmp_path / "icons")


@pytest.fixture
def guard(tmp_path):
    return IconRetryGuard(FileDataStore(tmp_path / "cache"), timedelta(hours=24), clock=lambda: T0)


@pytest.fixture
def prefetcher(icons, guard):
    return IconPrefetcher(icons, guard)


class _Recorder:
    """MockTransport handler serving one site and counting requests."""

    def __init__(self) -> None:
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url == "https://good.example.com/":
            return httpx.Response(200, html='<link rel="icon" href="/i.png">')
        if url == "https://good.example.com/i.png":
            return httpx.Response(200, content=b"png")
        if url == "https://broken.example.com/":
            return httpx.Response(200, html='<link rel="icon" href="http://[::1/x.png">')
        return httpx.Response(404)


GOOD = LinkRecord(short="good", long="https://good.example.com/")
BAD = LinkRecord(short="bad", long="https://bad.example.com/")
BROKEN = LinkRecord(short="broken", long="https://broken.example.com/")


class TestEligibility:
    def test_existing_icon_skipped_without_marker(self, prefetcher, icons, guard):
        icons.write(GOOD, b"png")
        assert guard.last_failure("good") is None
        assert prefetcher.wants_icon(GOOD) is False
        assert prefetcher.needs_icon_download([GOOD]) is False

    def test_recent_failure_skipped(self, prefetcher, guard):
        guard.record_failure("bad")
        assert prefetcher.wants_icon(BAD) is False

    def test_missing_icon_wanted(self, prefetcher):
        assert prefetcher.needs_icon_download([GOOD, BAD]) is True


class TestPrefetch:
    @pytest.mark.asyncio
    async def test_batch_continues_after_failure(self, prefetcher, icons, guard):
        recorder = _Recorder()
        async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
            report = await prefetcher.prefetch(client, [BAD, GOOD])

        assert report.failed == ["bad"]
        assert report.downloaded == ["good"]
        assert icons.has_icon(GOOD)
        assert guard.should_attempt("bad") is False
        assert guard.last_failure("good") is None

    @pytest.mark.asyncio
    async def test_malformed_icon_href_does_not_abort_batch(self, prefetcher, icons, guard):
        recorder = _Recorder()
        async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
            report = await prefetcher.prefetch(client, [BROKEN, GOOD])

        assert report.failed == ["broken"]
        assert report.downloaded == ["good"]
        assert icons.has_icon(GOOD)
        assert guard.last_failure("broken").failed_at == T0

    @pytest.mark.asyncio
    async def test_unexpected_error_recorded_and_batch_continues(
        self, prefetcher, icons, guard, monkeypatch,
    ):
        from aliaslookup.icons import prefetcher as prefetcher_module

        real_download = prefetcher_module.download_icon

        async def flaky(client, link, cache):
            if link.short == "bad":
                raise ValueError("unexpected")
            await real_download(client, link, cache)

        monkeypatch.setattr(prefetcher_module, "download_icon", flaky)
        recorder = _Recorder()
        async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
            report = await prefetcher.prefetch(client, [BAD, GOOD])

        assert report.failed == ["bad"]
        assert report.downloaded == ["good"]
        assert guard.should_attempt("bad") is False

    @pytest.mark.asyncio
    async def test_existing_icon_makes_no_request(self, prefetcher, icons):
        icons.write(GOOD, b"png")
        recorder = _Recorder()
        async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
            report = await prefetcher.prefetch(client, [GOOD])
        assert report.skipped == ["good"]
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_marked_failure_not_retried(self, prefetcher):
        recorder = _Recorder()
        async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
            await prefetcher.prefetch(client, [BAD])
            first = len(recorder.requests)
            report = await prefetcher.prefetch(client, [BAD])
        assert report.skipped == ["bad"]
        assert len(recorder.requests) == first
