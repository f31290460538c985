from __future__ import annotations

import pytest

from redmock.engine import RedisMock
from redmock.keyspace.store import StorageRegistry


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> StorageRegistry:
    return StorageRegistry(clock=clock)


@pytest.fixture
def engine(registry: StorageRegistry) -> RedisMock:
    return RedisMock(registry)
