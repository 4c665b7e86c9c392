# src/aliaslookup/cache/serializer.py — v1
"""Record list <-> bytes serialization for cache entries."""

from __future__ import annotations

import json
from typing import Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from aliaslookup.core.errors import CacheCorruptedError

RecordT = TypeVar("RecordT", bound=BaseModel)


def dump_records(records: Sequence[BaseModel]) -> bytes:
    """Serialize records, in order, to a JSON array."""
    return json.dumps([r.model_dump(mode="json") for r in records]).encode("utf-8")


def load_records(key: str, payload: bytes, model: type[RecordT]) -> list[RecordT]:
    """Deserialize a JSON array written by dump_records.

    Raises:
        CacheCorruptedError: If the payload is not a valid list of model.
    """
    try:
        return TypeAdapter(list[model]).validate_json(payload)  # type: ignore[valid-type]
    except ValidationError as e:
        raise CacheCorruptedError(key, f"{e.error_count()} validation error(s)") from e
