"""Positional cursor paging and index-range normalization."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from redmock.errors import InvalidArgumentError
from redmock.keyspace.pattern import MATCH_ALL, matcher
from redmock.keyspace.values import parse_int


T = TypeVar("T")

DEFAULT_SCAN_COUNT = 10


def scan_page(
    snapshot: Sequence[str],
    *,
    cursor: int,
    count: int,
    pattern: str = MATCH_ALL,
) -> tuple[int, list[str]]:
    """Walk ``count`` positions of ``snapshot`` starting at ``cursor``.

    The returned cursor is the position after the last one visited, or 0 once
    the walk reaches or passes the end. Cursors are offsets into the snapshot
    order, so mutating the collection between calls may skip or repeat items.
    """
    if cursor < 0:
        raise InvalidArgumentError("cursor must be a non-negative integer")
    if count <= 0:
        raise InvalidArgumentError("COUNT must be a positive integer")
    accepts = matcher(pattern)
    stop = cursor + count
    matched = [item for item in snapshot[cursor:stop] if accepts(item)]
    next_cursor = 0 if stop >= len(snapshot) else stop
    return next_cursor, matched


def scan_options(options: Mapping[str, Any] | None, *, default_count: int = DEFAULT_SCAN_COUNT) -> tuple[str, int]:
    normalized = {str(name).upper(): value for name, value in (options or {}).items()}
    pattern = normalized.get("MATCH")
    count = normalized.get("COUNT")
    return (
        MATCH_ALL if pattern is None else str(pattern),
        default_count if count is None else parse_int(count, field_name="COUNT"),
    )


def index_range(values: Sequence[T], start: int, stop: int) -> list[T]:
    length = len(values)
    if length == 0:
        return []
    normalized_start = start if start >= 0 else length + start
    normalized_stop = stop if stop >= 0 else length + stop
    normalized_start = max(0, normalized_start)
    if normalized_stop < 0:
        return []
    normalized_stop = min(length - 1, normalized_stop)
    if normalized_start >= length or normalized_stop < normalized_start:
        return []
    return list(values[normalized_start : normalized_stop + 1])
