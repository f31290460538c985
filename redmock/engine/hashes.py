"""Hash commands."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from redmock.engine.base import EngineBase, command, flatten, unique
from redmock.keyspace.values import ValueKind, as_int, parse_int, stringify


class HashCommands(EngineBase):
    def _hash(self, key: str) -> dict[str, Any] | None:
        return self._area.get(key, ValueKind.HASH)

    def _writable_hash(self, key: str) -> dict[str, Any]:
        current = self._hash(key)
        if current is None:
            current = {}
            self._area.put(key, ValueKind.HASH, current)
        return current

    @command()
    def hset(self, key: str, field: Any, value: Any) -> int | None:
        field = stringify(field)
        current = self._writable_hash(key)
        is_new = field not in current
        current[field] = value
        self._area.clear_expiry(key)
        return int(is_new)

    @command()
    def hsetnx(self, key: str, field: Any, value: Any) -> int | None:
        field = stringify(field)
        current = self._hash(key)
        if current is not None and field in current:
            return 0
        self._writable_hash(key)[field] = value
        self._area.clear_expiry(key)
        return 1

    @command()
    def hmset(self, key: str, pairs: Mapping[Any, Any]) -> str | None:
        self._hash(key)
        for field, value in pairs.items():
            self.hset(key, field, value)
        return "OK"

    @command()
    def hget(self, key: str, field: Any) -> str | None:
        field = stringify(field)
        current = self._hash(key)
        if current is None or field not in current:
            return None
        return stringify(current[field])

    @command()
    def hmget(self, key: str, fields: Any) -> dict[str, str | None] | None:
        current = self._hash(key) or {}
        names = [stringify(name) for name in flatten([fields])]
        return {name: stringify(current[name]) if name in current else None for name in names}

    @command()
    def hdel(self, key: str, *fields: Any) -> int | None:
        current = self._hash(key)
        if current is None:
            return 0
        removed = 0
        for field in unique(stringify(name) for name in flatten(fields)):
            if field in current:
                del current[field]
                removed += 1
        self._area.drop_if_empty(key)
        return removed

    @command()
    def hkeys(self, key: str) -> list[str] | None:
        return list(self._hash(key) or ())

    @command(wrongtype=0)
    def hlen(self, key: str) -> int:
        return len(self._hash(key) or ())

    @command()
    def hgetall(self, key: str) -> dict[str, str] | None:
        return {field: stringify(value) for field, value in (self._hash(key) or {}).items()}

    @command(wrongtype=0)
    def hexists(self, key: str, field: Any) -> int:
        return int(stringify(field) in (self._hash(key) or ()))

    @command()
    def hincrby(self, key: str, field: Any, increment: Any) -> int | None:
        amount = parse_int(increment, field_name="increment")
        field = stringify(field)
        current = self._hash(key)
        if current is not None and field in current:
            base = as_int(current[field])
            if base is None:
                return None
        else:
            base = 0
        total = base + amount
        self._writable_hash(key)[field] = total
        return total
