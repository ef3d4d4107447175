"""
Result deduplication.

Records produced by several tool calls often repeat: the same meeting is
found by two keyword searches, the same agenda appears in a document search
and in the meeting's details. These helpers drop the repeats while keeping
first-seen order.
"""

import json
import logging
from typing import Any, Callable, Hashable, Iterable, TypeVar

from pydantic import BaseModel

__all__ = ["deduplicate_by_key", "deduplicate_sources", "value_key"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ══════════════════════════════════════════════════════════════════════════════
# Deduplication
# ══════════════════════════════════════════════════════════════════════════════


def deduplicate_by_key(
    items: Iterable[T], key: Callable[[T], Hashable]
) -> list[T]:
    """
    Keep the first item for each key, preserving order.

    Example:
        >>> deduplicate_by_key(meetings, key=lambda m: m.id)
    """
    seen: set[Hashable] = set()
    unique: list[T] = []
    original = 0

    for item in items:
        original += 1
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        unique.append(item)

    removed = original - len(unique)
    if removed > 0:
        logger.debug(f"Deduplication: removed {removed} of {original}")

    return unique


def value_key(item: Any) -> str:
    """Key identifying a record by value (every field, canonical JSON)."""
    if isinstance(item, BaseModel):
        item = item.model_dump(mode="json")
    return json.dumps(item, sort_keys=True, default=str)


def deduplicate_sources(sources: Iterable[T]) -> list[T]:
    """Drop sources equal by value to an earlier one."""
    return deduplicate_by_key(sources, key=value_key)
