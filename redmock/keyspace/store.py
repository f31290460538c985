"""Storage areas and the registry that shares them between engine handles."""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
import time
from typing import Any, Callable

from redmock.errors import TypeMismatchError
from redmock.keyspace.values import ValueKind, payload_size


Clock = Callable[[], float]

DEFAULT_STORAGE = ""


@dataclass(slots=True)
class StorageArea:
    """One named keyspace: three aligned maps indexed by key.

    ``values`` and ``types`` always hold the same keys. A key missing from
    ``expiries`` never expires. Expiry is enforced lazily by
    :meth:`touch_expiry`; nothing sweeps in the background.
    """

    name: str
    clock: Clock = time.time
    values: dict[str, Any] = field(default_factory=dict)
    types: dict[str, ValueKind] = field(default_factory=dict)
    expiries: dict[str, int] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock)

    def now(self) -> int:
        return int(self.clock())

    def touch_expiry(self, key: str) -> bool:
        deadline = self.expiries.get(key)
        if deadline is None or self.now() <= deadline:
            return False
        self.delete(key)
        return True

    def kind_of(self, key: str) -> ValueKind | None:
        self.touch_expiry(key)
        return self.types.get(key)

    def get(self, key: str, kind: ValueKind | None = None) -> Any:
        """Return the live payload for ``key`` or None.

        With ``kind`` given, a key holding another kind raises
        :class:`TypeMismatchError`.
        """
        current = self.kind_of(key)
        if current is None:
            return None
        if kind is not None and current is not kind:
            raise TypeMismatchError(key, kind.value, current.value)
        return self.values[key]

    def check(self, key: str, kind: ValueKind) -> None:
        self.get(key, kind)

    def put(self, key: str, kind: ValueKind, payload: Any) -> None:
        self.values[key] = payload
        self.types[key] = kind

    def delete(self, key: str) -> int:
        kind = self.types.pop(key, None)
        payload = self.values.pop(key, None)
        self.expiries.pop(key, None)
        if kind is None:
            return 0
        return payload_size(kind, payload)

    def drop_if_empty(self, key: str) -> None:
        if key in self.values and self.types[key] is not ValueKind.STRING and not self.values[key]:
            self.delete(key)

    def expiry_of(self, key: str) -> int | None:
        return self.expiries.get(key)

    def set_expiry(self, key: str, timestamp: int) -> None:
        self.expiries[key] = int(timestamp)

    def clear_expiry(self, key: str) -> None:
        self.expiries.pop(key, None)

    def purge_expired(self) -> int:
        expired = [key for key in list(self.expiries) if self.touch_expiry(key)]
        return len(expired)

    def keys(self) -> list[str]:
        self.purge_expired()
        return list(self.values)

    def reset(self) -> None:
        self.values.clear()
        self.types.clear()
        self.expiries.clear()


class StorageRegistry:
    """Process-level set of storage areas, shared by every engine built on it."""

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = clock or time.time
        self._lock = threading.Lock()
        self._areas: dict[str, StorageArea] = {DEFAULT_STORAGE: StorageArea(DEFAULT_STORAGE, clock=self._now)}

    def _now(self) -> float:
        return self._clock()

    def set_clock(self, clock: Clock) -> None:
        self._clock = clock

    def select(self, name: str) -> StorageArea:
        with self._lock:
            area = self._areas.get(name)
            if area is None:
                area = StorageArea(name, clock=self._now)
                self._areas[name] = area
            return area

    def names(self) -> list[str]:
        with self._lock:
            return list(self._areas)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._areas

    def reset(self, name: str) -> None:
        area = self.select(name)
        with area.lock:
            area.reset()
