"""Exception hierarchy raised by the command engine."""

from __future__ import annotations


class RedisMockError(RuntimeError):
    pass


class InvalidArgumentError(RedisMockError, ValueError):
    pass


class UnsupportedOperationError(RedisMockError):
    """Raised for command forms the emulator deliberately does not reproduce."""


class TypeMismatchError(RedisMockError):
    """Key holds a different kind of value. Converted to a sentinel by the engine."""

    def __init__(self, key: str, expected: object, actual: object) -> None:
        super().__init__(f"key '{key}' holds {actual}, expected {expected}")
        self.key = key
        self.expected = expected
        self.actual = actual
