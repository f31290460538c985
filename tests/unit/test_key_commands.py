from redmock.engine import RedisMock
from redmock.keyspace.store import StorageRegistry


def test_ttl_reports_absent_persistent_and_remaining(engine: RedisMock, clock) -> None:
    assert engine.ttl("missing") == -2
    engine.set("plain", "v")
    assert engine.ttl("plain") == -1
    engine.set("short", "v", {"ex": 30})
    clock.advance(10)
    assert engine.ttl("short") == 20


def test_expired_key_is_absent_for_every_query(engine: RedisMock, clock) -> None:
    engine.set("k", "v")
    assert engine.expire("k", 5) == 1
    clock.advance(6)
    assert engine.get("k") is None
    assert engine.ttl("k") == -2
    assert engine.type("k") == "none"
    assert engine.exists("k") == 0
    assert engine.get_data() == {}
    assert engine.get_data_ttl() == {}


def test_expired_container_is_recreated_by_write(engine: RedisMock, clock) -> None:
    engine.rpush("jobs", "old")
    engine.expire("jobs", 1)
    clock.advance(2)
    assert engine.rpush("jobs", "new") == 1
    assert engine.lrange("jobs", 0, -1) == ["new"]
    assert engine.ttl("jobs") == -1


def test_expire_on_missing_key_returns_zero(engine: RedisMock) -> None:
    assert engine.expire("nope", 10) == 0
    assert engine.expireat("nope", 10) == 0


def test_expireat_uses_absolute_timestamp(engine: RedisMock, clock) -> None:
    engine.set("k", 1)
    assert engine.expireat("k", int(clock.now) + 100) == 1
    assert engine.ttl("k") == 100


def test_type_reports_each_kind(engine: RedisMock) -> None:
    engine.set("s", "v")
    engine.rpush("l", "a")
    engine.sadd("set", "a")
    engine.hset("h", "f", "v")
    engine.zadd("z", 1, "a")
    engine.setbit("b", 3, 1)
    assert [engine.type(key) for key in ("s", "l", "set", "h", "z", "b", "none")] == [
        "string",
        "list",
        "set",
        "hash",
        "zset",
        "string",
        "none",
    ]


def test_exists_counts_flattened_keys(engine: RedisMock) -> None:
    engine.set("a", 1)
    engine.set("b", 2)
    assert engine.exists("a", ["b", "c"]) == 2


def test_delete_counts_container_elements(engine: RedisMock) -> None:
    engine.sadd("tags", "a", "b", "c")
    engine.set("name", "x")
    engine.rpush("queue", "1", "2")
    assert engine.delete("tags", ["name", "queue"], "missing") == 6
    assert engine.dbsize() == 0


def test_delete_absent_key_returns_zero(engine: RedisMock) -> None:
    assert engine.delete("absent") == 0


def test_keys_matches_glob_in_insertion_order(engine: RedisMock) -> None:
    for key in ("user:1", "session:1", "user:2", "user:10"):
        engine.set(key, 1)
    assert engine.keys("user:?") == ["user:1", "user:2"]
    assert engine.keys() == ["user:1", "session:1", "user:2", "user:10"]


def test_scan_chains_cursor_over_all_keys(engine: RedisMock) -> None:
    expected = [f"k{index}" for index in range(5)]
    for key in expected:
        engine.set(key, 1)

    cursor, page = engine.scan(0, {"COUNT": 2})
    assert cursor != 0
    assert len(page) <= 2
    seen = list(page)
    while cursor != 0:
        cursor, page = engine.scan(cursor, {"COUNT": 2})
        seen.extend(page)
    assert sorted(seen) == expected


def test_scan_uses_configured_default_count(registry: StorageRegistry) -> None:
    engine = RedisMock(registry, scan_count=3)
    for index in range(5):
        engine.set(f"k{index}", index)
    assert engine.scan(0) == [3, ["k0", "k1", "k2"]]
    assert engine.scan(3, {"match": "k4"}) == [0, ["k4"]]


def test_flushdb_is_idempotent(engine: RedisMock) -> None:
    engine.set("a", 1)
    assert engine.flushdb() == "OK"
    assert engine.dbsize() == 0
    assert engine.flushdb() == "OK"
    assert engine.dbsize() == 0


def test_reset_returns_the_engine_and_clears_storage(engine: RedisMock) -> None:
    engine.set("a", 1)
    assert engine.reset() is engine
    assert engine.get_data() == {}


def test_get_data_types_uses_type_names(engine: RedisMock) -> None:
    engine.set("s", 1)
    engine.zadd("z", 1, "m")
    assert engine.get_data_types() == {"s": "string", "z": "zset"}


def test_select_storage_switches_keyspace(registry: StorageRegistry) -> None:
    engine = RedisMock(registry)
    engine.set("k", "default")
    engine.select_storage("other")
    assert engine.storage == "other"
    assert engine.get("k") is None
    engine.set("k", "other")
    engine.select_storage("")
    assert engine.get("k") == "default"


def test_engines_on_same_registry_share_storage(registry: StorageRegistry) -> None:
    writer = RedisMock(registry, storage="shared")
    reader = RedisMock(registry, storage="shared")
    writer.set("k", "v")
    assert reader.get("k") == "v"


def test_command_names_lists_the_surface() -> None:
    names = RedisMock.command_names()
    for name in ("get", "set", "delete", "zunionstore", "sscan", "bitcount", "watch", "eval"):
        assert name in names
    assert "multi" not in names
    assert "select_storage" not in names
    queued = RedisMock.command_names(queued_only=True)
    assert "get" in queued
    assert "watch" not in queued
    assert "quit" not in queued
