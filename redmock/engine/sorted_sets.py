"""Sorted set commands built on :mod:`redmock.keyspace.zset`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from redmock.engine.base import EngineBase, command, flatten
from redmock.errors import UnsupportedOperationError
from redmock.keyspace import zset
from redmock.keyspace.cursor import index_range
from redmock.keyspace.values import ValueKind, format_number, parse_int, parse_score, stringify


def _zadd_pair(args: tuple[Any, ...]) -> tuple[Any, str]:
    if len(args) == 1 and isinstance(args[0], Mapping):
        if len(args[0]) != 1:
            raise UnsupportedOperationError(
                "zadd used with a mapping cannot set more than one member at once"
            )
        member, score = next(iter(args[0].items()))
        return score, member
    if len(args) == 2:
        return args[0], args[1]
    raise UnsupportedOperationError(
        "zadd takes either a score and a member, or a mapping with a single member -> score entry"
    )


def _range_options(options: Mapping[str, Any] | None) -> tuple[int, int | None, bool]:
    normalized = {str(name).lower(): value for name, value in (options or {}).items()}
    limit = normalized.get("limit")
    offset, count = 0, None
    if isinstance(limit, (list, tuple)) and len(limit) == 2:
        offset = parse_int(limit[0], field_name="offset")
        count = parse_int(limit[1], field_name="count")
    return offset, count, bool(normalized.get("withscores", False))


class SortedSetCommands(EngineBase):
    def _zset(self, key: str) -> dict[str, Any] | None:
        return self._area.get(key, ValueKind.ZSET)

    def _store_zset(self, key: str, scores: Mapping[str, Any]) -> None:
        if scores:
            self._area.put(key, ValueKind.ZSET, zset.canonical(scores))
        else:
            self._area.delete(key)

    @command()
    def zadd(self, key: str, *args: Any) -> int | None:
        raw_score, member = _zadd_pair(args)
        member = stringify(member)
        current = self._zset(key)
        score = parse_score(raw_score)
        scores = dict(current or {})
        is_new = member not in scores
        scores[member] = score
        self._store_zset(key, scores)
        self._area.clear_expiry(key)
        return int(is_new)

    @command()
    def zscore(self, key: str, member: Any) -> str | None:
        member = stringify(member)
        current = self._zset(key)
        if current is None or member not in current:
            return None
        return format_number(current[member])

    @command(wrongtype=0)
    def zcard(self, key: str) -> int:
        return len(self._zset(key) or ())

    @command()
    def zcount(self, key: str, minimum: Any, maximum: Any) -> int | None:
        selected = self.zrangebyscore(key, minimum, maximum)
        return None if selected is None else len(selected)

    @command()
    def zincrby(self, key: str, increment: Any, member: Any) -> int | float | None:
        amount = parse_score(increment)
        member = stringify(member)
        current = self._zset(key)
        if current is None or member not in current:
            self.zadd(key, amount, member)
            return amount
        total = current[member] + amount
        self.zadd(key, total, member)
        return total

    @command()
    def zrank(self, key: str, member: Any) -> int | None:
        member = stringify(member)
        current = self._zset(key)
        if current is None:
            return None
        return zset.rank(current, member)

    @command()
    def zrevrank(self, key: str, member: Any) -> int | None:
        member = stringify(member)
        current = self._zset(key)
        if current is None:
            return None
        position = zset.rank(current, member)
        if position is None:
            return None
        return len(current) - position - 1

    @command(wrongtype=0)
    def zrem(self, key: str, *members: Any) -> int:
        names = [stringify(member) for member in flatten(members)]
        if len(names) != 1:
            raise UnsupportedOperationError("zrem cannot remove more than one member at once")
        current = self._zset(key)
        if current is None or names[0] not in current:
            return 0
        scores = dict(current)
        del scores[names[0]]
        self._store_zset(key, scores)
        return 1

    @command(wrongtype=0)
    def zremrangebyscore(self, key: str, minimum: Any, maximum: Any) -> int:
        if self._zset(key) is None:
            return 0
        removed = 0
        for member in self.zrangebyscore(key, minimum, maximum) or []:
            removed += self.zrem(key, member)
        return removed

    @command()
    def zrange(self, key: str, start: int, stop: int, withscores: bool = False) -> list[str] | dict[str, str] | None:
        return self._index_slice(key, start, stop, withscores=withscores, reverse=False)

    @command()
    def zrevrange(self, key: str, start: int, stop: int, withscores: bool = False) -> list[str] | dict[str, str] | None:
        return self._index_slice(key, start, stop, withscores=withscores, reverse=True)

    @command()
    def zrangebyscore(
        self,
        key: str,
        minimum: Any,
        maximum: Any,
        options: Mapping[str, Any] | None = None,
    ) -> list[str] | dict[str, str] | None:
        return self._score_slice(key, minimum, maximum, options, reverse=False)

    @command()
    def zrevrangebyscore(
        self,
        key: str,
        maximum: Any,
        minimum: Any,
        options: Mapping[str, Any] | None = None,
    ) -> list[str] | dict[str, str] | None:
        return self._score_slice(key, minimum, maximum, options, reverse=True)

    @command()
    def zunionstore(self, destination: str, keys: list[str], options: Mapping[str, Any] | None = None) -> int | None:
        names = flatten([keys])
        weights, how = zset.union_options(names, options)
        sources = [self._zset(name) or {} for name in names]
        self._area.touch_expiry(destination)
        self._area.delete(destination)
        for weight, scores in zip(weights, sources):
            for member, score in zset.ordered_items(scores):
                weighted = zset.weighted(score, weight)
                existing = self._zset(destination)
                if existing is None or member not in existing:
                    self.zadd(destination, weighted, member)
                elif how == "SUM":
                    self.zincrby(destination, weighted, member)
                else:
                    self.zadd(destination, zset.aggregate(how, existing[member], weighted), member)
        return self.zcount(destination, zset.NEG_INF, zset.POS_INF)

    def _score_slice(
        self,
        key: str,
        minimum: Any,
        maximum: Any,
        options: Mapping[str, Any] | None,
        *,
        reverse: bool,
    ) -> list[str] | dict[str, str]:
        offset, count, withscores = _range_options(options)
        current = self._zset(key)
        if current is None:
            return []
        selected = zset.range_by_score(current, minimum, maximum, reverse=reverse, offset=offset, count=count)
        if withscores:
            return zset.with_scores(selected)
        return [member for member, _score in selected]

    def _index_slice(
        self,
        key: str,
        start: int,
        stop: int,
        *,
        withscores: bool,
        reverse: bool,
    ) -> list[str] | dict[str, str]:
        current = self._zset(key)
        if current is None:
            return []
        ordered = zset.ordered_items(current, reverse=reverse)
        selected = index_range(ordered, parse_int(start, field_name="start"), parse_int(stop, field_name="stop"))
        if withscores:
            return zset.with_scores(selected)
        return [member for member, _score in selected]
