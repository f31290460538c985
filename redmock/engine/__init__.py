"""Command engine: the emulated command surface over a storage registry."""

from __future__ import annotations

from redmock.config.schema import EngineConfig
from redmock.keyspace.store import StorageRegistry

from .base import command, unbuffered
from .buffer import BufferMode, ResultBuffer
from .hashes import HashCommands
from .keys import KeyCommands
from .lists import ListCommands
from .server import ServerCommands
from .sets import SetCommands
from .sorted_sets import SortedSetCommands
from .strings import StringCommands
from .transactions import TransactionCommands


class RedisMock(
    KeyCommands,
    StringCommands,
    ListCommands,
    SetCommands,
    HashCommands,
    SortedSetCommands,
    ServerCommands,
    TransactionCommands,
):
    """In-process emulation of a subset of the Redis command surface.

    Engines built on the same :class:`~redmock.keyspace.StorageRegistry` share
    keyspaces; buffering state belongs to each engine instance.
    """

    @classmethod
    def from_config(cls, config: EngineConfig, registry: StorageRegistry | None = None) -> "RedisMock":
        shared = registry if registry is not None else StorageRegistry()
        for name in config.storages:
            shared.select(name)
        return cls(shared, storage=config.default_storage, scan_count=config.scan_count)


__all__ = [
    "BufferMode",
    "RedisMock",
    "ResultBuffer",
    "command",
    "unbuffered",
]
