"""MULTI/EXEC and client pipeline entry points."""

from __future__ import annotations

from typing import Any

from redmock.engine.base import EngineBase, unbuffered
from redmock.engine.buffer import BufferMode


class TransactionCommands(EngineBase):
    def _open(self, mode: BufferMode) -> "TransactionCommands":
        self._buffer.start(mode)
        self.logger.info(
            "buffering started",
            extra={"service": "engine", "storage": self._area.name, "event_action": mode.value},
        )
        return self

    def _close(self, action: str) -> list[Any]:
        mode = self._buffer.mode
        results = self._buffer.finish()
        self.logger.info(
            "buffering finished",
            extra={
                "service": "engine",
                "storage": self._area.name,
                "event_action": action,
                "payload": {"mode": mode.value, "results": len(results)},
            },
        )
        return results

    def multi(self) -> "TransactionCommands":
        return self._open(BufferMode.TRANSACTION)

    def exec(self) -> list[Any]:
        return self._close("exec")

    def discard(self) -> str:
        self._close("discard")
        return "OK"

    @unbuffered
    def watch(self, *keys: Any) -> bool:
        _ = keys
        return True

    @unbuffered
    def unwatch(self) -> bool:
        return True

    def pipeline(self) -> "TransactionCommands":
        return self._open(BufferMode.PIPELINE)

    def execute(self) -> list[Any]:
        return self._close("execute")
