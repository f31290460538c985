"""Client-library shaped facades over the command engine."""

from .redis_py import MockPipeline, MockRedis, connect, from_url, shared_registry

__all__ = [
    "MockPipeline",
    "MockRedis",
    "connect",
    "from_url",
    "shared_registry",
]
