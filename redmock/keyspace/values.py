"""Value kinds stored in the keyspace and scalar coercion helpers."""

from __future__ import annotations

from enum import Enum
import math
import re
from typing import Any

from redmock.errors import InvalidArgumentError


_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class ValueKind(str, Enum):
    STRING = "string"
    LIST = "list"
    SET = "set"
    HASH = "hash"
    ZSET = "zset"
    BITMAP = "bitmap"

    @property
    def type_name(self) -> str:
        # Bitmaps are strings as far as TYPE is concerned.
        if self is ValueKind.BITMAP:
            return ValueKind.STRING.value
        return self.value


def payload_size(kind: ValueKind, payload: Any) -> int:
    if kind is ValueKind.STRING:
        return 1
    return len(payload)


def as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return int(value)
    return None


def as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _NUMBER_RE.match(text) and not _INTEGER_RE.match(text):
            return float(text)
    return None


def format_number(value: int | float) -> str:
    if isinstance(value, float):
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def parse_score(raw: Any) -> int | float:
    if isinstance(raw, bool):
        raise InvalidArgumentError("score should be either an integer or a float")
    if isinstance(raw, (int, float)):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if _INTEGER_RE.match(text):
            return int(text)
        if _NUMBER_RE.match(text):
            return float(text)
    raise InvalidArgumentError("score should be either an integer or a float")


def parse_int(raw: Any, *, field_name: str) -> int:
    parsed = as_int(raw)
    if parsed is None:
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        raise InvalidArgumentError(f"{field_name} must be an integer")
    return parsed


def parse_float(raw: Any, *, field_name: str) -> float:
    if isinstance(raw, bool):
        raise InvalidArgumentError(f"{field_name} must be a number")
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str) and _NUMBER_RE.match(raw.strip()):
        return float(raw)
    raise InvalidArgumentError(f"{field_name} must be a number")
