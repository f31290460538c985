"""Deferred result collection for MULTI/EXEC and client pipelines."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any


class BufferMode(str, Enum):
    NONE = "none"
    TRANSACTION = "transaction"
    PIPELINE = "pipeline"


class ResultBuffer:
    """Collects command results while a transaction or pipeline is open.

    Composite commands wrap their sub-calls in :meth:`suspended` so that the
    composite contributes exactly one entry.
    """

    def __init__(self) -> None:
        self.mode = BufferMode.NONE
        self._results: list[Any] = []

    @property
    def active(self) -> bool:
        return self.mode is not BufferMode.NONE

    def start(self, mode: BufferMode) -> None:
        self.mode = mode
        self._results = []

    def collect(self, result: Any) -> bool:
        if not self.active:
            return False
        self._results.append(result)
        return True

    def finish(self) -> list[Any]:
        results = self._results
        self.mode = BufferMode.NONE
        self._results = []
        return results

    def discard(self) -> None:
        self.finish()

    @contextmanager
    def suspended(self) -> Iterator[None]:
        saved = self.mode
        self.mode = BufferMode.NONE
        try:
            yield
        finally:
            self.mode = saved
