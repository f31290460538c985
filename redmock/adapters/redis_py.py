"""redis-py flavoured client facade over the command engine."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any
from urllib.parse import parse_qs, urlparse

from redis.exceptions import DataError, ResponseError

from redmock.core.logging import get_logger
from redmock.engine import RedisMock
from redmock.errors import InvalidArgumentError, UnsupportedOperationError
from redmock.keyspace.store import StorageRegistry
from redmock.keyspace.values import stringify


DEFAULT_CONNECT_DATABASE = "1"
DEFAULT_URL_DATABASE = "0"
SUPPORTED_URL_SCHEMES = {"redis", "rediss", "unix"}

_shared_registry = StorageRegistry()

Transform = Callable[[Any], Any]


def shared_registry() -> StorageRegistry:
    return _shared_registry


def _identity(value: Any) -> Any:
    return value


def _ok(value: Any) -> bool | None:
    if value is None:
        return None
    return value == "OK"


def _set_reply(value: Any) -> bool | None:
    return True if value == "OK" else None


def _as_bool(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


def _as_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def _as_set(value: Any) -> set[Any] | None:
    if value is None:
        return None
    return set(value)


def _scan_reply(value: Any) -> tuple[int, list[Any]] | None:
    if value is None:
        return None
    cursor, items = value
    return int(cursor), list(items)


def _ordered_hmget(fields: list[Any]) -> Transform:
    def convert(value: Any) -> list[Any] | None:
        if value is None:
            return None
        return [value.get(stringify(field)) for field in fields]

    return convert


def _score_pairs(withscores: bool) -> Transform:
    def convert(value: Any) -> Any:
        if value is None or not withscores:
            return value
        return [(member, float(score)) for member, score in value.items()]

    return convert


class MockRedis:
    """Client object exposing redis-py names and argument conventions.

    Replies are converted the way redis-py converts them (booleans for flag
    replies, floats for scores, sets for set members). Engine argument errors
    surface as :class:`redis.exceptions.DataError` and unsupported command
    forms as :class:`redis.exceptions.ResponseError`.
    """

    def __init__(
        self,
        engine: RedisMock | None = None,
        *,
        registry: StorageRegistry | None = None,
        db: str = DEFAULT_URL_DATABASE,
    ) -> None:
        if engine is None:
            engine = RedisMock(registry if registry is not None else _shared_registry, storage=str(db))
        self.engine = engine

    @property
    def db(self) -> str:
        return self.engine.storage

    def _call(self, name: str, *args: Any, transform: Transform = _identity, **kwargs: Any) -> Any:
        try:
            result = getattr(self.engine, name)(*args, **kwargs)
        except InvalidArgumentError as exc:
            raise DataError(str(exc)) from exc
        except UnsupportedOperationError as exc:
            raise ResponseError(str(exc)) from exc
        return self._finish(result, transform)

    def _finish(self, result: Any, transform: Transform) -> Any:
        return transform(result)

    def pipeline(self, transaction: bool = True) -> "MockPipeline":
        engine = RedisMock(self.engine.registry, storage=self.engine.storage, scan_count=self.engine.scan_count)
        return MockPipeline(engine, transaction=transaction)

    def close(self) -> None:
        self.engine.quit()

    # keys

    def delete(self, *names: Any) -> int:
        return self._call("delete", *names)

    def exists(self, *names: Any) -> int:
        return self._call("exists", *names)

    def expire(self, name: str, time: int) -> bool:
        return self._call("expire", name, time, transform=_as_bool)

    def expireat(self, name: str, when: int) -> bool:
        return self._call("expireat", name, when, transform=_as_bool)

    def ttl(self, name: str) -> int:
        return self._call("ttl", name)

    def type(self, name: str) -> str:
        return self._call("type", name)

    def keys(self, pattern: str = "*") -> list[str]:
        return self._call("keys", pattern)

    def scan(self, cursor: int = 0, match: str | None = None, count: int | None = None) -> tuple[int, list[str]]:
        options = {"match": match, "count": count}
        present = {name: value for name, value in options.items() if value is not None}
        return self._call("scan", cursor, present, transform=_scan_reply)

    def scan_iter(self, match: str | None = None, count: int | None = None) -> Iterator[str]:
        cursor = None
        while cursor != 0:
            cursor, keys = self.scan(cursor or 0, match=match, count=count)
            yield from keys

    def dbsize(self) -> int:
        return self._call("dbsize")

    def flushdb(self) -> bool:
        return self._call("flushdb", transform=_ok)

    # strings

    def get(self, name: str) -> Any:
        return self._call("get", name)

    def set(
        self,
        name: str,
        value: Any,
        ex: int | None = None,
        px: int | None = None,
        nx: bool = False,
        xx: bool = False,
    ) -> bool | None:
        options: dict[str, Any] = {"nx": nx, "xx": xx}
        if ex is not None:
            options["ex"] = ex
        if px is not None:
            options["px"] = px
        return self._call("set", name, value, options, transform=_set_reply)

    def setex(self, name: str, time: int, value: Any) -> bool | None:
        return self._call("setex", name, time, value, transform=_set_reply)

    def setnx(self, name: str, value: Any) -> bool:
        return self._call("setnx", name, value, transform=_as_bool)

    def mget(self, keys: Any, *args: Any) -> list[Any]:
        return self._call("mget", keys, *args)

    def mset(self, mapping: Mapping[str, Any]) -> bool:
        return self._call("mset", mapping, transform=_ok)

    def incr(self, name: str, amount: int = 1) -> int | None:
        return self._call("incrby", name, amount)

    incrby = incr

    def decr(self, name: str, amount: int = 1) -> int | None:
        return self._call("decrby", name, amount)

    decrby = decr

    def incrbyfloat(self, name: str, amount: float = 1.0) -> float | None:
        return self._call("incrbyfloat", name, amount, transform=_as_float)

    # lists

    def lpush(self, name: str, *values: Any) -> int | None:
        return self._call("lpush", name, *values)

    def rpush(self, name: str, *values: Any) -> int | None:
        return self._call("rpush", name, *values)

    def lpop(self, name: str) -> Any:
        return self._call("lpop", name)

    def rpop(self, name: str) -> Any:
        return self._call("rpop", name)

    def llen(self, name: str) -> int:
        return self._call("llen", name)

    def lindex(self, name: str, index: int) -> Any:
        return self._call("lindex", name, index)

    def lrange(self, name: str, start: int, end: int) -> list[Any] | None:
        return self._call("lrange", name, start, end)

    def ltrim(self, name: str, start: int, end: int) -> bool | None:
        return self._call("ltrim", name, start, end, transform=_ok)

    def lrem(self, name: str, count: int, value: Any) -> int:
        return self._call("lrem", name, value, count)

    def rpoplpush(self, src: str, dst: str) -> Any:
        return self._call("rpoplpush", src, dst)

    # sets

    def sadd(self, name: str, *values: Any) -> int | None:
        return self._call("sadd", name, *values)

    def srem(self, name: str, *values: Any) -> int:
        return self._call("srem", name, *values)

    def smembers(self, name: str) -> set[Any] | None:
        return self._call("smembers", name, transform=_as_set)

    def scard(self, name: str) -> int:
        return self._call("scard", name)

    def sismember(self, name: str, value: Any) -> bool:
        return self._call("sismember", name, value, transform=_as_bool)

    def sunion(self, keys: Any, *args: Any) -> set[Any] | None:
        return self._call("sunion", keys, *args, transform=_as_set)

    def sinter(self, keys: Any, *args: Any) -> set[Any] | None:
        return self._call("sinter", keys, *args, transform=_as_set)

    def sdiff(self, keys: Any, *args: Any) -> set[Any] | None:
        return self._call("sdiff", keys, *args, transform=_as_set)

    def sscan(self, name: str, cursor: int = 0, match: str | None = None, count: int | None = None) -> tuple[int, list[Any]] | None:
        options = {"match": match, "count": count}
        return self._call(
            "sscan",
            name,
            cursor,
            {option: value for option, value in options.items() if value is not None},
            transform=_scan_reply,
        )

    # hashes

    def hset(self, name: str, key: Any = None, value: Any = None, mapping: Mapping[Any, Any] | None = None) -> int | None:
        pairs: dict[Any, Any] = dict(mapping or {})
        if key is not None:
            pairs[key] = value
        if not pairs:
            raise DataError("'hset' with no key value pairs")
        if len(pairs) == 1:
            field, item = next(iter(pairs.items()))
            return self._call("hset", name, field, item)
        return self._call("hmset", name, pairs, transform=lambda reply: None if reply is None else len(pairs))

    def hsetnx(self, name: str, key: Any, value: Any) -> int | None:
        return self._call("hsetnx", name, key, value)

    def hmset(self, name: str, mapping: Mapping[Any, Any]) -> bool | None:
        return self._call("hmset", name, mapping, transform=_ok)

    def hget(self, name: str, key: Any) -> Any:
        return self._call("hget", name, key)

    def hmget(self, name: str, keys: Any, *args: Any) -> list[Any] | None:
        fields = list(keys) if isinstance(keys, (list, tuple)) else [keys]
        fields.extend(args)
        return self._call("hmget", name, fields, transform=_ordered_hmget(fields))

    def hdel(self, name: str, *keys: Any) -> int | None:
        return self._call("hdel", name, *keys)

    def hkeys(self, name: str) -> list[Any] | None:
        return self._call("hkeys", name)

    def hlen(self, name: str) -> int:
        return self._call("hlen", name)

    def hgetall(self, name: str) -> dict[Any, Any] | None:
        return self._call("hgetall", name)

    def hexists(self, name: str, key: Any) -> bool:
        return self._call("hexists", name, key, transform=_as_bool)

    def hincrby(self, name: str, key: Any, amount: int = 1) -> int | None:
        return self._call("hincrby", name, key, amount)

    # sorted sets

    def zadd(self, name: str, mapping: Mapping[str, Any]) -> int | None:
        return self._call("zadd", name, mapping)

    def zscore(self, name: str, value: str) -> float | None:
        return self._call("zscore", name, value, transform=_as_float)

    def zcard(self, name: str) -> int:
        return self._call("zcard", name)

    def zcount(self, name: str, min: Any, max: Any) -> int | None:
        return self._call("zcount", name, min, max)

    def zincrby(self, name: str, amount: Any, value: str) -> float | None:
        return self._call("zincrby", name, amount, value, transform=_as_float)

    def zrank(self, name: str, value: str) -> int | None:
        return self._call("zrank", name, value)

    def zrevrank(self, name: str, value: str) -> int | None:
        return self._call("zrevrank", name, value)

    def zrem(self, name: str, *values: str) -> int:
        return self._call("zrem", name, *values)

    def zremrangebyscore(self, name: str, min: Any, max: Any) -> int:
        return self._call("zremrangebyscore", name, min, max)

    def zrange(self, name: str, start: int, end: int, desc: bool = False, withscores: bool = False) -> Any:
        command = "zrevrange" if desc else "zrange"
        return self._call(command, name, start, end, withscores, transform=_score_pairs(withscores))

    def zrevrange(self, name: str, start: int, end: int, withscores: bool = False) -> Any:
        return self._call("zrevrange", name, start, end, withscores, transform=_score_pairs(withscores))

    def zrangebyscore(
        self,
        name: str,
        min: Any,
        max: Any,
        start: int | None = None,
        num: int | None = None,
        withscores: bool = False,
    ) -> Any:
        options = self._range_options(start, num, withscores)
        return self._call("zrangebyscore", name, min, max, options, transform=_score_pairs(withscores))

    def zrevrangebyscore(
        self,
        name: str,
        max: Any,
        min: Any,
        start: int | None = None,
        num: int | None = None,
        withscores: bool = False,
    ) -> Any:
        options = self._range_options(start, num, withscores)
        return self._call("zrevrangebyscore", name, max, min, options, transform=_score_pairs(withscores))

    @staticmethod
    def _range_options(start: int | None, num: int | None, withscores: bool) -> dict[str, Any]:
        if (start is None) != (num is None):
            raise DataError("``start`` and ``num`` must both be specified")
        options: dict[str, Any] = {"withscores": withscores}
        if start is not None:
            options["limit"] = [start, num]
        return options

    def zunionstore(self, dest: str, keys: Any, aggregate: str | None = None) -> int | None:
        options: dict[str, Any] = {}
        if isinstance(keys, Mapping):
            options["weights"] = list(keys.values())
            keys = list(keys)
        if aggregate is not None:
            options["aggregate"] = aggregate
        return self._call("zunionstore", dest, list(keys), options)

    # bits

    def setbit(self, name: str, offset: int, value: int) -> int | None:
        return self._call("setbit", name, offset, value)

    def getbit(self, name: str, offset: int) -> int:
        return self._call("getbit", name, offset)

    def bitcount(self, name: str) -> int:
        return self._call("bitcount", name)

    # server

    def watch(self, *names: Any) -> bool:
        return self._call("watch", *names)

    def unwatch(self) -> bool:
        return self._call("unwatch")

    def eval(self, script: str, numkeys: int, *keys_and_args: Any) -> None:
        return self._call("eval", script, numkeys, *keys_and_args)

    def evalsha(self, sha: str, numkeys: int, *keys_and_args: Any) -> None:
        return self._call("evalsha", sha, numkeys, *keys_and_args)


class MockPipeline(MockRedis):
    """Buffers engine replies and converts them all on :meth:`execute`.

    With ``transaction=True`` the engine runs in MULTI/EXEC mode, otherwise in
    client pipeline mode. Either way every queued command has already been
    applied to the keyspace when it was queued.
    """

    def __init__(self, engine: RedisMock, *, transaction: bool = True) -> None:
        super().__init__(engine)
        self.transaction = transaction
        self._transforms: list[Transform] = []
        self._open()

    def _open(self) -> None:
        if self.transaction:
            self.engine.multi()
        else:
            self.engine.pipeline()

    def _finish(self, result: Any, transform: Transform) -> Any:
        if result is self.engine:
            self._transforms.append(transform)
            return self
        return transform(result)

    def __enter__(self) -> "MockPipeline":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.reset()

    def __len__(self) -> int:
        return len(self._transforms)

    def execute(self) -> list[Any]:
        results = self.engine.exec() if self.transaction else self.engine.execute()
        transforms, self._transforms = self._transforms, []
        self._open()
        return [transform(result) for transform, result in zip(transforms, results)]

    def reset(self) -> None:
        if self.engine.buffering:
            self.engine.discard()
        self._transforms = []

    def scan_iter(self, match: str | None = None, count: int | None = None) -> Iterator[str]:
        raise ResponseError("scan_iter is not available on a pipeline")

    def pipeline(self, transaction: bool = True) -> "MockPipeline":
        raise ResponseError("pipelines cannot be nested")


def connect(config: Mapping[str, Any] | None = None, registry: StorageRegistry | None = None) -> MockRedis:
    """Open a client on the storage area named by ``config["database"]``."""
    settings = dict(config or {})
    database = str(settings.get("database", DEFAULT_CONNECT_DATABASE))
    client = MockRedis(registry=registry, db=database)
    get_logger("redmock.adapters").info(
        "client connected",
        extra={"service": "adapter", "storage": database, "event_action": "connect"},
    )
    return client


def from_url(url: str, registry: StorageRegistry | None = None) -> MockRedis:
    """Open a client from a ``redis://host:port/db`` style URL."""
    parsed = urlparse(url)
    if parsed.scheme not in SUPPORTED_URL_SCHEMES:
        raise ValueError(
            "redis url must specify one of the following schemes (redis://, rediss://, unix://)"
        )
    database = DEFAULT_URL_DATABASE
    query_db = parse_qs(parsed.query).get("db")
    path = parsed.path.strip("/")
    if query_db:
        database = query_db[0]
    elif parsed.scheme != "unix" and path:
        database = path
    client = MockRedis(registry=registry, db=database)
    get_logger("redmock.adapters").info(
        "client connected",
        extra={
            "service": "adapter",
            "storage": database,
            "event_action": "from_url",
            "payload": {"host": parsed.hostname or "", "port": parsed.port},
        },
    )
    return client
