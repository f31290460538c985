from redmock.engine import RedisMock


def test_hset_reports_new_fields(engine: RedisMock) -> None:
    assert engine.hset("h", "f", "v") == 1
    assert engine.hset("h", "f", "w") == 0
    assert engine.hget("h", "f") == "w"


def test_hset_clears_ttl(engine: RedisMock) -> None:
    engine.hset("h", "f", "v")
    engine.expire("h", 100)
    engine.hset("h", "g", "v")
    assert engine.ttl("h") == -1


def test_hsetnx_only_writes_missing_fields(engine: RedisMock) -> None:
    assert engine.hsetnx("h", "f", "v") == 1
    assert engine.hsetnx("h", "f", "w") == 0
    assert engine.hget("h", "f") == "v"


def test_hmset_and_hmget(engine: RedisMock) -> None:
    assert engine.hmset("h", {"a": 1, "b": "two"}) == "OK"
    assert engine.hmget("h", ["a", "b", "c"]) == {"a": "1", "b": "two", "c": None}
    assert engine.hmget("missing", "a") == {"a": None}


def test_hdel_counts_removed_fields_and_drops_empty_hash(engine: RedisMock) -> None:
    engine.hmset("h", {"a": 1, "b": 2})
    assert engine.hdel("h", "a", "zz") == 1
    assert engine.hdel("h", ["b"]) == 1
    assert engine.exists("h") == 0
    assert engine.hdel("h", "a") == 0


def test_hash_reads(engine: RedisMock) -> None:
    engine.hmset("h", {"a": 1, "b": True})
    assert engine.hkeys("h") == ["a", "b"]
    assert engine.hlen("h") == 2
    assert engine.hgetall("h") == {"a": "1", "b": "1"}
    assert engine.hexists("h", "a") == 1
    assert engine.hexists("h", "c") == 0
    assert engine.hget("h", "c") is None
    assert engine.hgetall("missing") == {}


def test_hash_commands_on_wrong_type(engine: RedisMock) -> None:
    engine.set("s", "v")
    assert engine.hset("s", "f", "v") is None
    assert engine.hget("s", "f") is None
    assert engine.hlen("s") == 0
    assert engine.hexists("s", "f") == 0
    assert engine.hmset("s", {"f": 1}) is None
    assert engine.get("s") == "v"


def test_hincrby(engine: RedisMock) -> None:
    assert engine.hincrby("h", "n", 5) == 5
    assert engine.hincrby("h", "n", -2) == 3
    engine.hset("h", "text", "abc")
    assert engine.hincrby("h", "text", 1) is None
    assert engine.hget("h", "text") == "abc"


def test_fields_are_matched_by_string_form(engine: RedisMock) -> None:
    assert engine.hset("h", 1, "a") == 1
    assert engine.hset("h", "1", "b") == 0
    assert engine.hget("h", "1") == "b"
    assert engine.hexists("h", 1) == 1
    assert engine.hmget("h", [1, "2"]) == {"1": "b", "2": None}
    assert engine.hincrby("h", 2, 5) == 5
    assert engine.hkeys("h") == ["1", "2"]
    assert engine.hdel("h", 1, "1") == 1
