import pytest

from redmock.engine import RedisMock
from redmock.errors import InvalidArgumentError


def test_connection_level_stubs(engine: RedisMock) -> None:
    assert engine.quit() == "OK"
    assert engine.monitor() is None
    assert engine.eval("return 1", 0) is None
    assert engine.evalsha("abc123", 1, "key") is None


def test_setbit_returns_previous_bit(engine: RedisMock) -> None:
    assert engine.setbit("bits", 7, 1) == 0
    assert engine.setbit("bits", 7, 0) == 1
    assert engine.getbit("bits", 7) == 0
    assert engine.getbit("bits", 100) == 0
    assert engine.getbit("missing", 0) == 0


def test_bitcount_counts_set_offsets(engine: RedisMock) -> None:
    engine.setbit("bits", 1, 1)
    engine.setbit("bits", 5, 1)
    engine.setbit("bits", 9, 0)
    assert engine.bitcount("bits") == 2
    assert engine.bitcount("missing") == 0


@pytest.mark.parametrize(("offset", "value"), [(-1, 1), (0, 2), ("x", 1)])
def test_setbit_validates_arguments(engine: RedisMock, offset: object, value: object) -> None:
    with pytest.raises(InvalidArgumentError):
        engine.setbit("bits", offset, value)
    assert engine.exists("bits") == 0


def test_bit_commands_on_wrong_type(engine: RedisMock) -> None:
    engine.set("plain", "v")
    assert engine.setbit("plain", 0, 1) is None
    assert engine.getbit("plain", 0) == 0
    assert engine.bitcount("plain") == 0
    assert engine.get("plain") == "v"
