"""Ranked-set algorithms over a member -> score mapping.

Stored sorted sets are kept in canonical order: ascending score, ties broken
by ascending member. Every write goes through :func:`canonical`, so plain
iteration over a stored mapping already yields rank order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import math
from typing import Any, Union

from redmock.errors import InvalidArgumentError
from redmock.keyspace.values import format_number, parse_score


Score = Union[int, float]

NEG_INF = "-inf"
POS_INF = "+inf"
AGGREGATES = ("SUM", "MIN", "MAX")


def _order_key(item: tuple[str, Score]) -> tuple[Score, str]:
    return item[1], item[0]


def ordered_items(scores: Mapping[str, Score], *, reverse: bool = False) -> list[tuple[str, Score]]:
    return sorted(scores.items(), key=_order_key, reverse=reverse)


def canonical(scores: Mapping[str, Score]) -> dict[str, Score]:
    return dict(ordered_items(scores))


def rank(scores: Mapping[str, Score], member: str) -> int | None:
    for position, (candidate, _score) in enumerate(ordered_items(scores)):
        if candidate == member:
            return position
    return None


@dataclass(frozen=True, slots=True)
class ScoreBound:
    value: float
    exclusive: bool = False

    @classmethod
    def parse(cls, raw: Any) -> "ScoreBound":
        if isinstance(raw, str):
            text = raw.strip().lower()
            if text in {NEG_INF, "-infinity"}:
                return cls(-math.inf)
            if text in {POS_INF, "inf", "+infinity", "infinity"}:
                return cls(math.inf)
            if text.startswith("("):
                return cls(float(cls._number(text[1:])), exclusive=True)
            return cls(float(cls._number(text)))
        return cls(float(cls._number(raw)))

    @staticmethod
    def _number(raw: Any) -> Score:
        try:
            return parse_score(raw)
        except InvalidArgumentError as exc:
            raise InvalidArgumentError(f"min or max is not a float: {raw!r}") from exc

    def admits_from_below(self, score: Score) -> bool:
        return score > self.value if self.exclusive else score >= self.value

    def admits_from_above(self, score: Score) -> bool:
        return score < self.value if self.exclusive else score <= self.value


def is_full_range(minimum: Any, maximum: Any) -> bool:
    return str(minimum).strip().lower() == NEG_INF and str(maximum).strip().lower() in {POS_INF, "inf"}


def range_by_score(
    scores: Mapping[str, Score],
    minimum: Any,
    maximum: Any,
    *,
    reverse: bool = False,
    offset: int = 0,
    count: int | None = None,
) -> list[tuple[str, Score]]:
    ordered = ordered_items(scores, reverse=reverse)
    if not is_full_range(minimum, maximum):
        lower = ScoreBound.parse(minimum)
        upper = ScoreBound.parse(maximum)
        ordered = [
            (member, score)
            for member, score in ordered
            if lower.admits_from_below(score) and upper.admits_from_above(score)
        ]
    if offset < 0:
        return []
    if count is None or count < 0:
        return ordered[offset:]
    return ordered[offset : offset + count]


def with_scores(items: Iterable[tuple[str, Score]]) -> dict[str, str]:
    return {member: format_number(score) for member, score in items}


def weighted(score: Score, weight: Any) -> Score:
    return score * parse_score(weight)


def aggregate(how: str, current: Score, incoming: Score) -> Score:
    if how == "SUM":
        return current + incoming
    if how == "MIN":
        return min(current, incoming)
    if how == "MAX":
        return max(current, incoming)
    raise InvalidArgumentError(f"unknown aggregate function '{how}'")


def union_options(keys: list[str], options: Mapping[str, Any] | None) -> tuple[list[Any], str]:
    normalized = {str(name).upper(): value for name, value in (options or {}).items()}
    weights = list(normalized.get("WEIGHTS") or [1] * len(keys))
    how = str(normalized.get("AGGREGATE", "SUM")).upper()
    if len(weights) != len(keys):
        raise InvalidArgumentError("there must be one weight per key")
    if how not in AGGREGATES:
        raise InvalidArgumentError(f"unknown aggregate function '{how}'")
    for weight in weights:
        parse_score(weight)
    return weights, how
