"""Shared plumbing for the command groups that make up :class:`RedisMock`."""

from __future__ import annotations

from collections.abc import Iterable
import functools
from typing import Any, Callable, TypeVar

from redmock.core.logging import get_logger
from redmock.engine.buffer import BufferMode, ResultBuffer
from redmock.errors import InvalidArgumentError, TypeMismatchError, UnsupportedOperationError
from redmock.keyspace.cursor import DEFAULT_SCAN_COUNT
from redmock.keyspace.store import DEFAULT_STORAGE, StorageArea, StorageRegistry


F = TypeVar("F", bound=Callable[..., Any])

COMMAND_ATTR = "__redmock_command__"
QUEUED_ATTR = "__redmock_queued__"


def command(*, wrongtype: Any = None) -> Callable[[F], F]:
    """Mark an engine method as a command.

    The wrapped call holds the storage area lock, runs with result buffering
    suspended so that nested commands answer directly, turns a type mismatch
    into ``wrongtype`` and finally routes the single result through the
    buffer.
    """

    def decorate(func: F) -> F:
        name = func.__name__.rstrip("_")

        @functools.wraps(func)
        def wrapper(self: "EngineBase", *args: Any, **kwargs: Any) -> Any:
            area = self._area
            with area.lock, self._buffer.suspended():
                try:
                    result = func(self, *args, **kwargs)
                except TypeMismatchError as exc:
                    self.logger.debug(
                        "type mismatch",
                        extra={
                            "service": "engine",
                            "storage": area.name,
                            "event_action": name,
                            "payload": {"key": exc.key, "expected": exc.expected, "actual": exc.actual},
                        },
                    )
                    result = wrongtype
                except (InvalidArgumentError, UnsupportedOperationError) as exc:
                    self.logger.warning(
                        "command rejected",
                        extra={
                            "service": "engine",
                            "storage": area.name,
                            "event_action": name,
                            "event_outcome": "failure",
                            "payload": {"error": str(exc), "error_type": type(exc).__name__},
                        },
                    )
                    raise
            self.logger.debug(
                "command executed",
                extra={"service": "engine", "storage": area.name, "event_action": name},
            )
            return self._reply(result)

        setattr(wrapper, COMMAND_ATTR, name)
        setattr(wrapper, QUEUED_ATTR, True)
        return wrapper  # type: ignore[return-value]

    return decorate


def unbuffered(func: F) -> F:
    """Expose a method as a command whose reply never enters the result buffer."""
    setattr(func, COMMAND_ATTR, func.__name__)
    return func


def flatten(values: Iterable[Any]) -> list[Any]:
    """Flatten one level of list/tuple arguments: ``("a", ["b", "c"])`` -> ``["a", "b", "c"]``."""
    flat: list[Any] = []
    for value in values:
        if isinstance(value, (list, tuple, set, frozenset)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat


def unique(values: Iterable[Any]) -> list[Any]:
    return list(dict.fromkeys(values))


class EngineBase:
    def __init__(
        self,
        registry: StorageRegistry | None = None,
        *,
        storage: str = DEFAULT_STORAGE,
        scan_count: int = DEFAULT_SCAN_COUNT,
    ) -> None:
        self.logger = get_logger("redmock.engine")
        self.registry = registry if registry is not None else StorageRegistry()
        self.scan_count = scan_count
        self._buffer = ResultBuffer()
        self._storage = storage
        self._area: StorageArea = self.registry.select(storage)

    @property
    def storage(self) -> str:
        return self._storage

    @property
    def buffer_mode(self) -> BufferMode:
        return self._buffer.mode

    @property
    def buffering(self) -> bool:
        return self._buffer.active

    @classmethod
    def command_names(cls, *, queued_only: bool = False) -> list[str]:
        names: list[str] = []
        for attribute in dir(cls):
            member = getattr(cls, attribute, None)
            if not callable(member) or not getattr(member, COMMAND_ATTR, None):
                continue
            if queued_only and not getattr(member, QUEUED_ATTR, False):
                continue
            names.append(attribute)
        return sorted(names)

    def select_storage(self, name: str) -> None:
        self._storage = str(name)
        self._area = self.registry.select(self._storage)
        self.logger.info(
            "storage selected",
            extra={"service": "engine", "storage": self._storage, "event_action": "select_storage"},
        )

    def _reply(self, result: Any) -> Any:
        if self._buffer.collect(result):
            return self
        return result
