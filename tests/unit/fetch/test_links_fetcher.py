# tests/unit/fetch/test_links_fetcher.py — v1
"""Tests for fetch/links_fetcher.py: NDJSON golink export parsing."""

from __future__ import annotations

import json

import httpx
import pytest

from aliaslookup.core.errors import FetchError, RecordParseError
from aliaslookup.fetch.links_fetcher import LinksFetcher

EXPORT = "\n".join(json.dumps(d) for d in [
    {"Short": "docs", "Long": "https://docs.example.com", "Owner": "ana@example.com",
     "Created": "2023-01-01T00:00:00Z", "LastEdit": "2023-01-02T00:00:00Z"},
    {"Short": "wiki", "Long": "https://wiki.example.com", "Owner": "bo@example.com"},
    {"Short": "cal", "Long": "https://calendar.example.com", "Owner": "ana@example.com"},
]) + "\n"


@pytest.fixture
def fetcher():
    return LinksFetcher("http://go.test/.export")


class TestParse:
    def test_parses_all_lines_in_order(self, fetcher):
        links = fetcher.parse(EXPORT)
        assert [l.short for l in links] == ["docs", "wiki", "cal"]
        assert links[0].owner == "ana@example.com"

    def test_blank_lines_skipped(self, fetcher):
        assert len(fetcher.parse("\n\n" + EXPORT + "\n\n")) == 3

    def test_empty_body(self, fetcher):
        assert fetcher.parse("") == []

    def test_invalid_json_aborts(self, fetcher):
        text = EXPORT + "{not json}\n"
        with pytest.raises(RecordParseError) as exc_info:
            fetcher.parse(text)
        assert exc_info.value.line_number == 4

    def test_missing_short_aborts(self, fetcher):
        with pytest.raises(RecordParseError):
            fetcher.parse('{"Long": "https://x"}')

    def test_duplicate_short_keeps_first(self, fetcher):
        text = EXPORT + json.dumps({"Short": "docs", "Long": "https://other"}) + "\n"
        links = fetcher.parse(text)
        assert len(links) == 3
        assert links[0].long == "https://docs.example.com"


class TestFetch:
    @pytest.mark.asyncio
    async def test_fetch_ok(self, fetcher):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "http://go.test/.export"
            return httpx.Response(200, text=EXPORT)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            links = await fetcher.fetch(client)
        assert len(links) == 3

    @pytest.mark.asyncio
    async def test_http_error_status(self, fetcher):
        transport = httpx.MockTransport(lambda r: httpx.Response(503))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(FetchError, match="503"):
                await fetcher.fetch(client)

    @pytest.mark.asyncio
    async def test_transport_error(self, fetcher):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(FetchError):
                await fetcher.fetch(client)
