"""Set commands. Members are stored as strings in insertion order so SSCAN cursors are stable."""

from __future__ import annotations

from typing import Any

from redmock.engine.base import EngineBase, command, flatten, unique
from redmock.keyspace.cursor import scan_options, scan_page
from redmock.keyspace.values import ValueKind, parse_int, stringify


def _members(values: tuple[Any, ...]) -> list[str]:
    return unique(stringify(member) for member in flatten(values))


class SetCommands(EngineBase):
    def _set(self, key: str) -> dict[str, None] | None:
        return self._area.get(key, ValueKind.SET)

    def _members_of(self, keys: tuple[Any, ...]) -> list[list[str]]:
        names = flatten(keys)
        for name in names:
            self._set(name)
        return [list(self._set(name) or ()) for name in names]

    @command()
    def sadd(self, key: str, *members: Any) -> int | None:
        current = self._set(key)
        candidates = _members(members)
        if current is None:
            if not candidates:
                return 0
            current = {}
            self._area.put(key, ValueKind.SET, current)
        added = [member for member in candidates if member not in current]
        current.update(dict.fromkeys(added))
        self._area.clear_expiry(key)
        return len(added)

    @command(wrongtype=0)
    def srem(self, key: str, *members: Any) -> int:
        current = self._set(key)
        if current is None:
            return 0
        removed = [member for member in _members(members) if member in current]
        for member in removed:
            del current[member]
        self._area.drop_if_empty(key)
        return len(removed)

    @command()
    def smembers(self, key: str) -> list[str] | None:
        return list(self._set(key) or ())

    @command(wrongtype=0)
    def scard(self, key: str) -> int:
        return len(self._set(key) or ())

    @command(wrongtype=0)
    def sismember(self, key: str, member: Any) -> int:
        return int(stringify(member) in (self._set(key) or ()))

    @command()
    def sunion(self, *keys: Any) -> list[str] | None:
        merged: list[str] = []
        for members in self._members_of(keys):
            merged.extend(members)
        return unique(merged)

    @command()
    def sinter(self, *keys: Any) -> list[str] | None:
        groups = self._members_of(keys)
        if not groups:
            return []
        first, others = groups[0], [set(group) for group in groups[1:]]
        return [member for member in first if all(member in other for other in others)]

    @command()
    def sdiff(self, *keys: Any) -> list[str] | None:
        groups = self._members_of(keys)
        if not groups:
            return []
        excluded: set[str] = set()
        for group in groups[1:]:
            excluded.update(group)
        return [member for member in groups[0] if member not in excluded]

    @command()
    def sscan(self, key: str, cursor: int = 0, options: dict[str, Any] | None = None) -> list[Any] | None:
        pattern, count = scan_options(options, default_count=self.scan_count)
        current = self._set(key)
        position = parse_int(cursor, field_name="cursor")
        if current is None:
            return [0, []]
        next_cursor, matched = scan_page(list(current), cursor=position, count=count, pattern=pattern)
        return [next_cursor, matched]
