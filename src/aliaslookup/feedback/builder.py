# src/aliaslookup/feedback/builder.py — v1
"""Turn served records into feedback items and filter them by query."""

from __future__ import annotations

from typing import Callable, Sequence

from aliaslookup.cache.models import DataResult
from aliaslookup.core.models import KeyRecord, LinkRecord
from aliaslookup.feedback.models import Feedback, Icon, Item
from aliaslookup.icons.icon_cache import IconCache

REFRESH_ARG = "refresh"


def matches(query: str, text: str) -> bool:
    """True when every query term is a case-insensitive subsequence of text."""
    haystack = text.lower()
    for term in query.lower().split():
        pos = 0
        for char in term:
            pos = haystack.find(char, pos)
            if pos < 0:
                return False
            pos += 1
    return True


def filter_items(items: Sequence[Item], query: str) -> list[Item]:
    return [
        item for item in items
        if matches(query, " ".join(filter(None, (item.title, item.autocomplete))))
    ]


def refresh_item(subject: str) -> Item:
    return Item(
        title="Refresh",
        subtitle=f"Force refresh of {subject}",
        arg=REFRESH_ARG,
        autocomplete=REFRESH_ARG,
    )


def link_item(link: LinkRecord, icons: IconCache | None = None) -> Item:
    icon = None
    if icons is not None and icons.has_icon(link):
        icon = Icon(path=str(icons.path_for(link)))
    return Item(
        uid=link.short,
        title=link.short,
        subtitle=link.long,
        arg=link.long,
        autocomplete=link.short,
        icon=icon,
    )


def key_item(key: KeyRecord) -> Item:
    return Item(
        title=key.comment,
        subtitle=key.key_line,
        arg=key.key_line,
        autocomplete=key.comment,
    )


def _build(
    result: DataResult,
    query: str,
    job_running: bool,
    subject: str,
    make_item: Callable[[object], Item],
) -> Feedback:
    feedback = Feedback()
    if result.pending:
        feedback.add(Item(title="Refreshing data...", valid=False))

    items = [make_item(record) for record in result.records]
    items.append(refresh_item(subject))
    if query and result.records:
        items = filter_items(items, query)
    feedback.items.extend(items)

    if feedback.is_empty and not job_running:
        feedback.add(Item(title=f"No {subject} found", valid=False))
    return feedback


def build_links_feedback(
    result: DataResult,
    query: str = "",
    job_running: bool = False,
    icons: IconCache | None = None,
) -> Feedback:
    return _build(result, query, job_running, "links", lambda r: link_item(r, icons))


def build_keys_feedback(
    result: DataResult,
    query: str = "",
    job_running: bool = False,
    icons: IconCache | None = None,
) -> Feedback:
    return _build(result, query, job_running, "keys", key_item)


def error_feedback(error: Exception) -> Feedback:
    """Single invalid item describing a fatal error."""
    return Feedback(items=[Item(title=str(error), subtitle=type(error).__name__, valid=False)])
