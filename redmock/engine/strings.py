"""Scalar commands: GET/SET family, batch get/set and counters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from redmock.engine.base import EngineBase, command, flatten
from redmock.errors import InvalidArgumentError
from redmock.keyspace.values import ValueKind, as_float, as_int, format_number, parse_float, parse_int, stringify


def _set_options(options: Any) -> tuple[bool, bool, int | None]:
    """Normalize SET options to ``(nx, xx, seconds)``.

    Accepts a number of seconds, a mapping such as ``{"nx": True, "ex": 10}``,
    or a sequence such as ``["nx", "px", 1500]``.
    """
    if options is None:
        return False, False, None
    if isinstance(options, bool):
        raise InvalidArgumentError("SET options must be seconds, a mapping or a sequence")
    if isinstance(options, (int, float)):
        return False, False, int(options)

    flags: set[str] = set()
    values: dict[str, Any] = {}
    if isinstance(options, str):
        flags.add(options.upper())
    elif isinstance(options, Mapping):
        for name, value in options.items():
            upper = str(name).upper()
            if upper in {"NX", "XX"}:
                if value:
                    flags.add(upper)
            else:
                values[upper] = value
    elif isinstance(options, (list, tuple)):
        items = list(options)
        index = 0
        while index < len(items):
            upper = str(items[index]).upper()
            if upper in {"EX", "PX"}:
                if index + 1 >= len(items):
                    raise InvalidArgumentError(f"SET option {upper} requires a value")
                values[upper] = items[index + 1]
                index += 2
                continue
            flags.add(upper)
            index += 1
    else:
        raise InvalidArgumentError("SET options must be seconds, a mapping or a sequence")

    unknown = flags - {"NX", "XX"} or set(values) - {"EX", "PX"}
    if unknown:
        raise InvalidArgumentError(f"unsupported SET option(s): {', '.join(sorted(unknown))}")
    if flags == {"NX", "XX"}:
        raise InvalidArgumentError("SET options NX and XX are mutually exclusive")
    if "EX" in values and "PX" in values:
        raise InvalidArgumentError("SET options EX and PX are mutually exclusive")

    seconds: int | None = None
    if values.get("EX") is not None:
        seconds = parse_int(values["EX"], field_name="EX")
    elif values.get("PX") is not None:
        seconds = parse_int(values["PX"], field_name="PX") // 1000
    return "NX" in flags, "XX" in flags, seconds


class StringCommands(EngineBase):
    @command()
    def get(self, key: str) -> str | None:
        value = self._area.get(key, ValueKind.STRING)
        return None if value is None else stringify(value)

    @command()
    def set(self, key: str, value: Any, options: Any = None) -> str | int:
        nx, xx, seconds = _set_options(options)
        exists = self._area.kind_of(key) is not None
        if (nx and exists) or (xx and not exists):
            return 0
        self._area.put(key, ValueKind.STRING, value)
        if seconds is not None:
            self._area.set_expiry(key, self._area.now() + seconds)
        return "OK"

    @command()
    def setex(self, key: str, seconds: int, value: Any) -> str | int:
        return self.set(key, value, parse_int(seconds, field_name="seconds"))

    @command()
    def setnx(self, key: str, value: Any) -> int:
        if self._area.kind_of(key) is not None:
            return 0
        self.set(key, value)
        return 1

    @command()
    def mget(self, *keys: Any) -> list[str | None]:
        return [self.get(key) for key in flatten(keys)]

    @command()
    def mset(self, pairs: Mapping[str, Any]) -> str:
        for key, value in pairs.items():
            self.set(key, value)
        return "OK"

    @command()
    def incr(self, key: str) -> int | None:
        return self.incrby(key, 1)

    @command()
    def incrby(self, key: str, increment: Any) -> int | None:
        return self._add_integer(key, parse_int(increment, field_name="increment"))

    @command()
    def decr(self, key: str) -> int | None:
        return self.decrby(key, 1)

    @command()
    def decrby(self, key: str, decrement: Any) -> int | None:
        return self._add_integer(key, -parse_int(decrement, field_name="decrement"))

    @command()
    def incrbyfloat(self, key: str, increment: Any) -> str | None:
        return self._add_float(key, parse_float(increment, field_name="increment"))

    @command()
    def decrbyfloat(self, key: str, decrement: Any) -> str | None:
        return self._add_float(key, -parse_float(decrement, field_name="decrement"))

    def _add_integer(self, key: str, amount: int) -> int | None:
        current = self._area.get(key, ValueKind.STRING)
        base = 0 if current is None else as_int(current)
        if base is None:
            return None
        total = base + amount
        self._area.put(key, ValueKind.STRING, total)
        return total

    def _add_float(self, key: str, amount: float) -> str | None:
        current = self._area.get(key, ValueKind.STRING)
        base = 0.0 if current is None else as_float(current)
        if base is None:
            return None
        total = base + amount
        self._area.put(key, ValueKind.STRING, total)
        return format_number(total)
