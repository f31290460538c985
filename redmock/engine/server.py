"""Connection/server level commands and the simplified bit commands."""

from __future__ import annotations

from typing import Any

from redmock.engine.base import EngineBase, command, unbuffered
from redmock.errors import InvalidArgumentError
from redmock.keyspace.values import ValueKind, parse_int


class ServerCommands(EngineBase):
    @unbuffered
    def quit(self) -> str:
        return "OK"

    @unbuffered
    def monitor(self) -> None:
        return None

    @unbuffered
    def eval(self, script: str, numkeys: int = 0, *arguments: Any) -> None:
        _ = (script, numkeys, arguments)
        return None

    @unbuffered
    def evalsha(self, sha: str, numkeys: int = 0, *arguments: Any) -> None:
        _ = (sha, numkeys, arguments)
        return None

    # Bitmaps are an offset -> bit mapping, not packed bytes.

    def _bitmap(self, key: str) -> dict[int, int] | None:
        return self._area.get(key, ValueKind.BITMAP)

    @command(wrongtype=0)
    def bitcount(self, key: str) -> int:
        return sum(1 for bit in (self._bitmap(key) or {}).values() if bit)

    @command()
    def setbit(self, key: str, offset: int, value: int) -> int | None:
        position = parse_int(offset, field_name="offset")
        bit = parse_int(value, field_name="value")
        if position < 0:
            raise InvalidArgumentError("bit offset is not an integer or out of range")
        if bit not in (0, 1):
            raise InvalidArgumentError("bit is not an integer or out of range")
        current = self._bitmap(key)
        if current is None:
            current = {}
            self._area.put(key, ValueKind.BITMAP, current)
        previous = current.get(position, 0)
        current[position] = bit
        return previous

    @command(wrongtype=0)
    def getbit(self, key: str, offset: int) -> int:
        return (self._bitmap(key) or {}).get(parse_int(offset, field_name="offset"), 0)
