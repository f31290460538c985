"""List commands. Elements are stored in their string form."""

from __future__ import annotations

from typing import Any

from redmock.engine.base import EngineBase, command
from redmock.keyspace.cursor import index_range
from redmock.keyspace.values import ValueKind, parse_int, stringify


class ListCommands(EngineBase):
    def _list(self, key: str) -> list[str] | None:
        return self._area.get(key, ValueKind.LIST)

    def _push(self, key: str, values: tuple[Any, ...], *, head: bool) -> int:
        current = self._list(key)
        if not values:
            return 0 if current is None else len(current)
        if current is None:
            current = []
            self._area.put(key, ValueKind.LIST, current)
        for value in values:
            if head:
                current.insert(0, stringify(value))
            else:
                current.append(stringify(value))
        return len(current)

    def _pop(self, key: str, *, head: bool) -> Any:
        current = self._list(key)
        if not current:
            return None
        value = current.pop(0 if head else -1)
        self._area.drop_if_empty(key)
        return value

    @command()
    def lpush(self, key: str, *values: Any) -> int | None:
        return self._push(key, values, head=True)

    @command()
    def rpush(self, key: str, *values: Any) -> int | None:
        return self._push(key, values, head=False)

    @command()
    def lpop(self, key: str) -> Any:
        return self._pop(key, head=True)

    @command()
    def rpop(self, key: str) -> Any:
        return self._pop(key, head=False)

    @command(wrongtype=0)
    def llen(self, key: str) -> int:
        current = self._list(key)
        return 0 if current is None else len(current)

    @command()
    def lindex(self, key: str, index: int) -> Any:
        current = self._list(key)
        position = parse_int(index, field_name="index")
        if not current or not -len(current) <= position < len(current):
            return None
        return current[position]

    @command()
    def lrange(self, key: str, start: int, stop: int) -> list[str] | None:
        current = self._list(key)
        if current is None:
            return []
        return index_range(current, parse_int(start, field_name="start"), parse_int(stop, field_name="stop"))

    @command()
    def ltrim(self, key: str, start: int, stop: int) -> str | None:
        current = self._list(key)
        if current is None:
            return "OK"
        current[:] = index_range(current, parse_int(start, field_name="start"), parse_int(stop, field_name="stop"))
        self._area.drop_if_empty(key)
        return "OK"

    @command(wrongtype=0)
    def lrem(self, key: str, value: Any, count: int) -> int | None:
        """Remove ``count`` occurrences of ``value``.

        ``count > 0`` removes from the head, ``count < 0`` from the tail and
        ``count == 0`` removes every occurrence.
        """
        current = self._list(key)
        if not current:
            return 0
        remaining = parse_int(count, field_name="count")
        from_tail = remaining < 0
        remaining = abs(remaining) or len(current)
        target = stringify(value)
        ordered = list(reversed(current)) if from_tail else list(current)
        kept: list[str] = []
        for item in ordered:
            if remaining and item == target:
                remaining -= 1
                continue
            kept.append(item)
        if from_tail:
            kept.reverse()
        removed = len(current) - len(kept)
        current[:] = kept
        self._area.drop_if_empty(key)
        return removed

    @command()
    def rpoplpush(self, source: str, destination: str) -> Any:
        self._list(destination)
        if not self._list(source):
            return None
        value = self.rpop(source)
        self.lpush(destination, value)
        return value
