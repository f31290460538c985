from pathlib import Path

import pytest

from redmock.config.loader import DEFAULT_CONFIG_PATH, initialize_config, load_config, load_script, resolve_config_path
from redmock.config.schema import parse_config
from redmock.engine import RedisMock
from redmock.keyspace.store import StorageRegistry


def test_load_defaults() -> None:
    config = load_config(Path("redmock/config/defaults.yml"))
    assert config.environment == "development"
    assert config.engine.default_storage == ""
    assert config.engine.scan_count == 10
    assert config.engine.storages == []
    assert config.api.host == "127.0.0.1"
    assert config.api.port == 8379
    assert config.api.docs_enabled is False
    assert config.api.max_batch_commands == 512
    assert config.logging.fmt == "ecs_json"
    assert config.logging.sink == "stdout"


def test_env_interpolation_with_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "redmock.yml"
    config_path.write_text(
        "engine:\n  default_storage: ${REDMOCK_TEST_DB:-7}\napi:\n  host: ${REDMOCK_TEST_HOST}\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("REDMOCK_TEST_DB", raising=False)
    monkeypatch.setenv("REDMOCK_TEST_HOST", "localhost")
    config = load_config(config_path)
    assert config.engine.default_storage == "7"
    assert config.api.host == "localhost"


def test_missing_env_variable_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "redmock.yml"
    config_path.write_text("api:\n  host: ${REDMOCK_UNSET_HOST}\n", encoding="utf-8")
    monkeypatch.delenv("REDMOCK_UNSET_HOST", raising=False)
    with pytest.raises(ValueError, match="REDMOCK_UNSET_HOST"):
        load_config(config_path)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yml")


def test_initialize_config_refuses_overwrite(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "redmock.yml"
    initialize_config(config_path)
    assert config_path.exists()
    with pytest.raises(FileExistsError):
        initialize_config(config_path)
    initialize_config(config_path, force=True)


def test_storage_names_accept_integers() -> None:
    config = parse_config({"engine": {"default_storage": 1, "storages": [2, "cache"]}})
    assert config.engine.default_storage == "1"
    assert config.engine.storages == ["2", "cache"]


@pytest.mark.parametrize(
    "raw",
    [
        {"engine": {"scan_count": 0}},
        {"engine": {"storages": "cache"}},
        {"engine": {"default_storage": True}},
        {"engine": []},
        {"api": {"port": 70000}},
        {"api": {"max_batch_commands": 0}},
        {"api": {"docs_enabled": "maybe"}},
        {"logging": {"level": "LOUD"}},
        {"logging": {"format": "xml"}},
        {"logging": {"sink": "syslog"}},
    ],
)
def test_invalid_values_raise_value_error(raw: dict) -> None:
    with pytest.raises(ValueError):
        parse_config(raw)


def test_docs_enabled_accepts_string_booleans() -> None:
    assert parse_config({"api": {"docs_enabled": "yes"}}).api.docs_enabled is True


def test_engine_from_config_prepares_storages() -> None:
    config = parse_config({"engine": {"default_storage": "main", "scan_count": 4, "storages": ["aux"]}})
    registry = StorageRegistry()
    engine = RedisMock.from_config(config.engine, registry)
    assert engine.storage == "main"
    assert engine.scan_count == 4
    assert "aux" in registry
    assert "main" in registry


def test_config_path_resolution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    explicit = tmp_path / "explicit.yml"
    monkeypatch.delenv("REDMOCK_CONFIG", raising=False)
    assert resolve_config_path() == DEFAULT_CONFIG_PATH
    monkeypatch.setenv("REDMOCK_CONFIG", str(tmp_path / "from-env.yml"))
    assert resolve_config_path() == tmp_path / "from-env.yml"
    assert resolve_config_path(explicit) == explicit


def test_load_config_without_path_uses_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "redmock.yml"
    config_path.write_text("engine:\n  scan_count: 25\n", encoding="utf-8")
    monkeypatch.setenv("REDMOCK_CONFIG", str(config_path))
    assert load_config().engine.scan_count == 25


def test_config_root_must_be_mapping(tmp_path: Path) -> None:
    config_path = tmp_path / "redmock.yml"
    config_path.write_text("- engine\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_config(config_path)


def test_load_script_normalizes_steps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    script = tmp_path / "script.yml"
    script.write_text(
        "- MULTI\n"
        "- command: ' Set '\n"
        "  args: [\"${REDMOCK_TEST_KEY:-greeting}\", hello]\n"
        "- command: get\n"
        "  args: [greeting]\n"
        "  kwargs: null\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("REDMOCK_TEST_KEY", raising=False)
    assert load_script(script) == [
        {"command": "multi", "args": [], "kwargs": {}},
        {"command": "set", "args": ["greeting", "hello"], "kwargs": {}},
        {"command": "get", "args": ["greeting"], "kwargs": {}},
    ]


@pytest.mark.parametrize(
    "body",
    [
        "command: get\n",
        "- args: [x]\n",
        "- command: get\n  args: x\n",
        "- command: set\n  kwargs: [ex]\n",
    ],
)
def test_load_script_rejects_malformed_steps(tmp_path: Path, body: str) -> None:
    script = tmp_path / "script.yml"
    script.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError):
        load_script(script)


def test_load_script_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="script"):
        load_script(tmp_path / "absent.yml")
