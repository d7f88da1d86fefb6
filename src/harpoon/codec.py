"""Marks and the codecs that turn them into their stored form."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass
class ListItem:
    """A single mark: a value (usually a root-relative path) plus free context."""

    value: str | None
    context: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Codec(Protocol):
    """Converts list items to and from the string form kept in the store."""

    def encode(self, item: ListItem) -> str: ...

    def decode(self, raw: str) -> ListItem: ...


class JsonCodec:
    """Default codec: one JSON object per item, ``{"value": ..., "context": ...}``."""

    def encode(self, item: ListItem) -> str:
        return json.dumps({"value": item.value, "context": item.context})

    def decode(self, raw: str) -> ListItem:
        obj = json.loads(raw)
        if not isinstance(obj, dict):
            raise ValueError(f"expected a JSON object, got {type(obj).__name__}")
        context = obj.get("context") or {}
        if not isinstance(context, dict):
            raise ValueError("context must be a JSON object")
        return ListItem(value=obj.get("value"), context=context)


def safe_decode(codec: Codec, raw: Any) -> ListItem | None:
    """Decode one stored entry, returning None (and logging) if it is malformed."""
    try:
        item = codec.decode(raw)
    except (ValueError, TypeError, KeyError) as e:
        logger.warning("Skipping malformed entry %r: %s", raw, e)
        return None
    if item is None:
        logger.warning("Skipping entry that decoded to nothing: %r", raw)
    return item
