# src/aliaslookup/core/models.py — v1
"""Domain records served by the lookup front-end: LinkRecord, KeyRecord."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_FRACTION_RE = re.compile(r"(\.\d+)")


class LinkRecord(BaseModel):
    """A golink: short alias pointing at a long URL.

    Accepts both the golink export field names (``Short``, ``LastEdit``...)
    and snake_case names; always serializes to snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    short: str = Field(validation_alias=AliasChoices("short", "Short"))
    long: str = Field(default="", validation_alias=AliasChoices("long", "Long"))
    owner: str = Field(default="", validation_alias=AliasChoices("owner", "Owner"))
    created: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created", "Created")
    )
    last_edit: datetime | None = Field(
        default=None, validation_alias=AliasChoices("last_edit", "LastEdit")
    )

    @field_validator("short")
    @classmethod
    def validate_short(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("short alias must not be empty")
        return v

    @field_validator("created", "last_edit", mode="before")
    @classmethod
    def trim_nanoseconds(cls, v: object) -> object:
        # golink timestamps carry nanoseconds; datetime holds microseconds
        if isinstance(v, str):
            return _FRACTION_RE.sub(lambda m: m.group(1)[:7], v)
        return v


class KeyRecord(BaseModel):
    """An authorized SSH public key line with its human label."""

    model_config = ConfigDict(frozen=True)

    key_line: str
    comment: str = ""

    @field_validator("key_line")
    @classmethod
    def validate_key_line(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("key_line must not be empty")
        return v
