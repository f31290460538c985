"""Dataclasses for top-level application config."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class EngineConfig:
    default_storage: str = ""
    scan_count: int = 10
    storages: list[str] = field(default_factory=list)


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8379
    docs_enabled: bool = False
    max_batch_commands: int = 512


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    fmt: str = "ecs_json"
    sink: str = "stdout"
    file_path: str | None = None
    service_name: str = "redmock"


@dataclass(slots=True)
class AppConfig:
    environment: str = "development"
    engine: EngineConfig = field(default_factory=EngineConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
VALID_LOG_FORMATS = {"json", "ecs_json", "plain"}
VALID_LOG_SINKS = {"stdout", "file"}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"'{name}' must be an object")
    return raw


def _parse_bool_value(raw: Any, *, field_name: str, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"'{field_name}' must be a boolean")


def _parse_storage_name(raw: Any, *, field_name: str) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        raise ValueError(f"'{field_name}' must be a string or an integer")
    return str(raw)


def parse_config(data: dict[str, Any]) -> AppConfig:
    if not isinstance(data, dict):
        raise ValueError("config root must be an object")
    environment = str(data.get("environment", "development"))

    engine_raw = _section(data, "engine")
    scan_count = int(engine_raw.get("scan_count", 10))
    if scan_count <= 0:
        raise ValueError("engine scan_count must be greater than zero")
    storages_raw = engine_raw.get("storages", []) or []
    if not isinstance(storages_raw, list):
        raise ValueError("'engine.storages' must be a list")
    engine = EngineConfig(
        default_storage=_parse_storage_name(engine_raw.get("default_storage"), field_name="engine.default_storage"),
        scan_count=scan_count,
        storages=[_parse_storage_name(item, field_name="engine.storages") for item in storages_raw],
    )

    api_raw = _section(data, "api")
    port = int(api_raw.get("port", 8379))
    if not 0 <= port <= 65535:
        raise ValueError("api port must be between 0 and 65535")
    max_batch_commands = int(api_raw.get("max_batch_commands", 512))
    if max_batch_commands <= 0:
        raise ValueError("api max_batch_commands must be greater than zero")
    api = APIConfig(
        host=str(api_raw.get("host", "127.0.0.1")).strip() or "127.0.0.1",
        port=port,
        docs_enabled=_parse_bool_value(api_raw.get("docs_enabled"), field_name="api.docs_enabled", default=False),
        max_batch_commands=max_batch_commands,
    )

    logging_raw = _section(data, "logging")
    level = str(logging_raw.get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"invalid log level '{level}'")
    log_format = str(logging_raw.get("format", logging_raw.get("fmt", "ecs_json"))).lower()
    if log_format not in VALID_LOG_FORMATS:
        raise ValueError(f"invalid log format '{log_format}'")
    sink = str(logging_raw.get("sink", "stdout")).lower()
    if sink not in VALID_LOG_SINKS:
        raise ValueError(f"invalid log sink '{sink}'")
    logging_config = LoggingConfig(
        level=level,
        fmt=log_format,
        sink=sink,
        file_path=logging_raw.get("file_path"),
        service_name=str(logging_raw.get("service_name", "redmock")),
    )

    return AppConfig(
        environment=environment,
        engine=engine,
        api=api,
        logging=logging_config,
    )
