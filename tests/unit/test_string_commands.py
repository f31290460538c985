import pytest

from redmock.engine import RedisMock
from redmock.errors import InvalidArgumentError


def test_set_and_get_stringify_scalars(engine: RedisMock) -> None:
    assert engine.set("n", 5) == "OK"
    assert engine.get("n") == "5"
    engine.set("f", 2.5)
    assert engine.get("f") == "2.5"
    assert engine.get("missing") is None


def test_set_nx_and_xx(engine: RedisMock) -> None:
    assert engine.set("k", "a", {"nx": True}) == "OK"
    assert engine.set("k", "b", {"nx": True}) == 0
    assert engine.get("k") == "a"
    assert engine.set("other", "b", {"xx": True}) == 0
    assert engine.get("other") is None
    assert engine.set("k", "c", ["XX"]) == "OK"
    assert engine.get("k") == "c"


def test_set_ex_and_px_options(engine: RedisMock, clock) -> None:
    engine.set("ex", "v", {"EX": 10})
    engine.set("px", "v", ["px", 2500])
    engine.set("seconds", "v", 7)
    assert engine.ttl("ex") == 10
    assert engine.ttl("px") == 2
    assert engine.ttl("seconds") == 7
    clock.advance(3)
    assert engine.get("px") is None


def test_plain_set_keeps_existing_ttl(engine: RedisMock) -> None:
    engine.set("k", "v", {"ex": 50})
    engine.set("k", "w")
    assert engine.ttl("k") == 50


def test_set_overwrites_other_kinds(engine: RedisMock) -> None:
    engine.rpush("k", "a")
    assert engine.set("k", "plain") == "OK"
    assert engine.type("k") == "string"


@pytest.mark.parametrize(
    "options",
    [
        {"nx": True, "xx": True},
        {"ex": 1, "px": 1000},
        ["keepttl"],
        ["ex"],
        {"ex": "soon"},
        True,
    ],
)
def test_set_rejects_invalid_options(engine: RedisMock, options: object) -> None:
    with pytest.raises(InvalidArgumentError):
        engine.set("k", "v", options)
    assert engine.get("k") is None


def test_setex_and_setnx(engine: RedisMock) -> None:
    assert engine.setex("k", 20, "v") == "OK"
    assert engine.ttl("k") == 20
    assert engine.setnx("k", "other") == 0
    assert engine.setnx("fresh", "v") == 1
    assert engine.get("fresh") == "v"


def test_mget_and_mset(engine: RedisMock) -> None:
    assert engine.mset({"a": 1, "b": "two"}) == "OK"
    engine.rpush("list", "x")
    assert engine.mget("a", ["b", "missing", "list"]) == ["1", "two", None, None]


def test_integer_counters(engine: RedisMock) -> None:
    assert engine.incr("c") == 1
    assert engine.incrby("c", 10) == 11
    assert engine.decr("c") == 10
    assert engine.decrby("c", "4") == 6
    engine.set("text", "41")
    assert engine.incr("text") == 42


def test_float_counters(engine: RedisMock) -> None:
    assert engine.incrbyfloat("f", 1.5) == "1.5"
    assert engine.incrbyfloat("f", "0.5") == "2"
    assert engine.decrbyfloat("f", 0.25) == "1.75"


def test_counters_refuse_mismatched_numeric_kind(engine: RedisMock) -> None:
    engine.set("int", 3)
    engine.set("float", "1.5")
    engine.set("text", "abc")
    assert engine.incrbyfloat("int", 1.0) is None
    assert engine.decrbyfloat("int", 1.0) is None
    assert engine.incrby("float", 1) is None
    assert engine.decrby("float", 1) is None
    assert engine.incr("text") is None
    assert engine.get("int") == "3"
    assert engine.get("float") == "1.5"
    assert engine.get("text") == "abc"


def test_counters_on_container_return_sentinel(engine: RedisMock) -> None:
    engine.sadd("set", "a")
    assert engine.incr("set") is None
    assert engine.get("set") is None
    assert engine.smembers("set") == ["a"]


def test_counter_rejects_non_numeric_increment(engine: RedisMock) -> None:
    with pytest.raises(InvalidArgumentError):
        engine.incrby("c", "lots")
    assert engine.exists("c") == 0
