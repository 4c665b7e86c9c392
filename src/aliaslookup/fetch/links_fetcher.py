# src/aliaslookup/fetch/links_fetcher.py — v1
"""Golink export parser: one JSON object per line."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from aliaslookup.core.errors import RecordParseError
from aliaslookup.core.models import LinkRecord
from aliaslookup.fetch.base_fetcher import BaseFetcher

logger = logging.getLogger(__name__)


class LinksFetcher(BaseFetcher):
    """Fetches golinks as newline-delimited JSON."""

    model = LinkRecord

    def parse(self, text: str) -> list[LinkRecord]:
        links: list[LinkRecord] = []
        seen: set[str] = set()

        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                link = LinkRecord.model_validate_json(line)
            except ValidationError as e:
                first = e.errors()[0]
                raise RecordParseError(line_number, first["msg"]) from e

            if link.short in seen:
                logger.warning("Ignoring duplicate link %r on line %d", link.short, line_number)
                continue
            seen.add(link.short)
            links.append(link)

        return links
