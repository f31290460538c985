"""Key lifecycle commands: expiry, type, existence, deletion and iteration."""

from __future__ import annotations

from typing import Any

from redmock.engine.base import EngineBase, command, flatten
from redmock.keyspace.cursor import scan_options, scan_page
from redmock.keyspace.pattern import matcher
from redmock.keyspace.values import parse_int


class KeyCommands(EngineBase):
    @command()
    def ttl(self, key: str) -> int:
        if self._area.kind_of(key) is None:
            return -2
        deadline = self._area.expiry_of(key)
        if deadline is None:
            return -1
        return deadline - self._area.now()

    @command()
    def expire(self, key: str, seconds: int) -> int:
        return self.expireat(key, self._area.now() + parse_int(seconds, field_name="seconds"))

    @command()
    def expireat(self, key: str, timestamp: int) -> int:
        if self._area.kind_of(key) is None:
            return 0
        self._area.set_expiry(key, parse_int(timestamp, field_name="timestamp"))
        return 1

    @command()
    def type(self, key: str) -> str:
        kind = self._area.kind_of(key)
        return "none" if kind is None else kind.type_name

    @command()
    def exists(self, *keys: Any) -> int:
        return sum(1 for key in flatten(keys) if self._area.kind_of(key) is not None)

    @command()
    def delete(self, *keys: Any) -> int:
        removed = 0
        for key in flatten(keys):
            self._area.touch_expiry(key)
            removed += self._area.delete(key)
        return removed

    @command()
    def keys(self, pattern: str = "*") -> list[str]:
        accepts = matcher(pattern)
        return [key for key in self._area.keys() if accepts(key)]

    @command()
    def scan(self, cursor: int = 0, options: dict[str, Any] | None = None) -> list[Any]:
        pattern, count = scan_options(options, default_count=self.scan_count)
        next_cursor, matched = scan_page(
            self._area.keys(),
            cursor=parse_int(cursor, field_name="cursor"),
            count=count,
            pattern=pattern,
        )
        return [next_cursor, matched]

    @command()
    def dbsize(self) -> int:
        return len(self._area.keys())

    @command()
    def flushdb(self) -> str:
        self._area.reset()
        self.logger.info(
            "storage flushed",
            extra={"service": "engine", "storage": self._area.name, "event_action": "flushdb"},
        )
        return "OK"

    def reset(self) -> "KeyCommands":
        with self._area.lock:
            self._area.reset()
        return self

    def get_data(self) -> dict[str, Any]:
        with self._area.lock:
            return dict(self._area.values)

    def get_data_ttl(self) -> dict[str, int]:
        with self._area.lock:
            return dict(self._area.expiries)

    def get_data_types(self) -> dict[str, str]:
        with self._area.lock:
            return {key: kind.type_name for key, kind in self._area.types.items()}
