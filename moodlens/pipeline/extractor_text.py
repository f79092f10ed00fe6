"""Flatten a board-like record into one text blob for classification."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_ITEM_FIELDS = ("text", "description", "title")


def _field(record: Any, name: str) -> str | None:
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    if isinstance(value, str) and value:
        return value
    return None


def extract(record: Any) -> str:
    """Concatenate title, description and per-item text fields.

    Records may be mappings or plain objects.  Missing, empty or
    non-string fields contribute nothing; the result is stripped and may
    be empty.
    """
    if record is None:
        return ""

    parts: list[str] = []
    for name in ("title", "description"):
        value = _field(record, name)
        if value:
            parts.append(value)

    items = record.get("items") if isinstance(record, Mapping) else getattr(record, "items", None)
    if isinstance(items, Sequence) and not isinstance(items, (str, bytes)):
        for item in items:
            if item is None:
                continue
            for name in _ITEM_FIELDS:
                value = _field(item, name)
                if value:
                    parts.append(value)

    return " ".join(parts).strip()
