"""Glob pattern translation for KEYS, SCAN and SSCAN."""

from __future__ import annotations

from functools import lru_cache
import re
from typing import Callable


MATCH_ALL = "*"


def translate(pattern: str) -> str:
    parts: list[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        elif char == "\\" and index + 1 < length:
            index += 1
            parts.append(re.escape(pattern[index]))
        elif char == "[":
            negate = pattern[index + 1 : index + 2] == "^"
            body_start = index + 2 if negate else index + 1
            closing = pattern.find("]", body_start)
            if closing <= body_start:
                # Unterminated or empty group: match it literally.
                parts.append(re.escape(char))
            else:
                body = pattern[body_start:closing].replace("\\", "\\\\").replace("[", "\\[")
                parts.append(f"[{'^' if negate else ''}{body}]")
                index = closing
        else:
            parts.append(re.escape(char))
        index += 1
    return "".join(parts)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    return re.compile(translate(pattern), re.DOTALL)


def matcher(pattern: str | None) -> Callable[[str], bool]:
    if pattern is None or pattern == MATCH_ALL:
        return lambda _value: True
    compiled = compile_pattern(pattern)
    return lambda value: compiled.fullmatch(value) is not None


def match(pattern: str, value: str) -> bool:
    return matcher(pattern)(value)
