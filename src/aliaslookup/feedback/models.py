# src/aliaslookup/feedback/models.py — v1
"""Script-filter feedback models, serialized to the launcher's JSON format."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Icon(BaseModel):
    path: str


class Item(BaseModel):
    """One selectable result row."""

    title: str
    subtitle: str | None = None
    arg: str | None = None
    autocomplete: str | None = None
    uid: str | None = None
    valid: bool = True
    icon: Icon | None = None


class Feedback(BaseModel):
    """Full response for one query invocation."""

    items: list[Item] = Field(default_factory=list)
    rerun: float | None = None

    def add(self, item: Item) -> Item:
        self.items.append(item)
        return item

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
