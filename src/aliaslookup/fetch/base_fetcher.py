# src/aliaslookup/fetch/base_fetcher.py — v1
"""Abstract fetcher: download an authoritative dataset and parse it."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx
from pydantic import BaseModel

from aliaslookup.core.errors import FetchError

logger = logging.getLogger(__name__)


class BaseFetcher(ABC):
    """Retrieves one remote dataset and turns it into records.

    Parsing is all-or-nothing: a single invalid line raises and no
    records are returned.
    """

    #: Record type produced by parse().
    model: type[BaseModel]

    def __init__(self, url: str) -> None:
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    @abstractmethod
    def parse(self, text: str) -> list[BaseModel]:
        """Parse a complete response body.

        Raises:
            RecordParseError: If any line is malformed.
        """

    async def fetch(self, client: httpx.AsyncClient) -> list[BaseModel]:
        """Download the dataset and parse it.

        Raises:
            FetchError: On transport errors or a non-2xx response.
            RecordParseError: If the body contains a malformed line.
        """
        logger.info("Downloading %s", self._url)
        try:
            resp = await client.get(self._url)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"Cannot download {self._url}: {e}") from e

        records = self.parse(resp.text)
        logger.info("Downloaded %d records from %s", len(records), self._url)
        return records
