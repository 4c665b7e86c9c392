# src/aliaslookup/icons/favicon.py — v1
"""Favicon discovery and download for link targets."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlsplit

import httpx
from bs4 import BeautifulSoup

from aliaslookup.core.errors import FetchError, NoIconFoundError
from aliaslookup.core.models import LinkRecord
from aliaslookup.icons.icon_cache import IconCache

logger = logging.getLogger(__name__)


def _icon_size(sizes: str | None) -> int:
    """Largest width declared in a sizes attribute ("32x32 64x64"), 0 if none."""
    best = 0
    for size in (sizes or "").lower().split():
        width, _, _ = size.partition("x")
        if width.isdigit():
            best = max(best, int(width))
    return best


def extract_icon_urls(html: str, base_url: str) -> list[str]:
    """Return icon URLs declared by <link rel="...icon..."> tags, largest first."""
    soup = BeautifulSoup(html, "html.parser")
    candidates: list[tuple[int, int, str]] = []

    for position, tag in enumerate(soup.find_all("link", href=True)):
        rel = tag.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if not any("icon" in r.lower() for r in rel):
            continue
        try:
            url = urljoin(base_url, tag["href"].strip())
        except ValueError:
            logger.debug("Skipping invalid icon href %r", tag["href"])
            continue
        candidates.append((-_icon_size(tag.get("sizes")), position, url))

    seen: set[str] = set()
    urls: list[str] = []
    for _, _, url in sorted(candidates):
        if url not in seen:
            seen.add(url)
            urls.append(url)
    return urls


async def find_icons(client: httpx.AsyncClient, url: str) -> list[str]:
    """Find icon URLs for the page at url.

    Falls back to /favicon.ico when the page declares no icon.

    Raises:
        FetchError: If the page cannot be retrieved.
    """
    try:
        resp = await client.get(url)
        resp.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(f"Cannot load {url}: {e}") from e

    page_url = str(resp.url)
    icons = extract_icon_urls(resp.text, page_url)
    if icons:
        return icons

    parts = urlsplit(page_url)
    return [f"{parts.scheme}://{parts.netloc}/favicon.ico"]


async def download_icon(
    client: httpx.AsyncClient, link: LinkRecord, icons: IconCache
) -> None:
    """Download the best icon of link's target into icons.

    Raises:
        NoIconFoundError: If the target declares no icon or it is empty.
        FetchError: If the page or the icon cannot be downloaded.
    """
    candidates = await find_icons(client, link.long)
    if not candidates:
        raise NoIconFoundError(f"no icon found at {link.long}")

    logger.info("Found %d icons at %s", len(candidates), link.long)
    url = candidates[0]
    logger.debug("Downloading icon for %s from %s", link.short, url)

    try:
        resp = await client.get(url)
        resp.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(f"Cannot download icon {url}: {e}") from e

    if not resp.content:
        raise NoIconFoundError(f"empty icon at {url}")

    icons.write(link, resp.content)
    logger.info("Downloaded icon for %s", link.short)
