"""Config and command-script loading."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import Any

import yaml

from redmock.config.schema import AppConfig, parse_config


DEFAULT_CONFIG_PATH = Path(__file__).with_name("defaults.yml")
CONFIG_PATH_ENV = "REDMOCK_CONFIG"
_ENV_TOKEN_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")


def resolve_config_path(path: Path | None = None) -> Path:
    """Explicit path, then ``$REDMOCK_CONFIG``, then the packaged defaults."""
    if path is not None:
        return path
    from_env = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> AppConfig:
    config_path = resolve_config_path(path)
    raw = _read_yaml(config_path, kind="config") or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config root must be a mapping: {config_path}")
    return parse_config(_interpolate_env(raw))


def load_script(path: Path) -> list[dict[str, Any]]:
    """Read a YAML list of command steps.

    A step is either a bare command name or a mapping with ``command`` and
    optional ``args`` / ``kwargs``. Environment tokens are expanded the same
    way as in config files.
    """
    raw = _read_yaml(path, kind="script") or []
    if not isinstance(raw, list):
        raise ValueError("script must be a list of commands")
    steps: list[dict[str, Any]] = []
    for index, item in enumerate(_interpolate_env(raw)):
        if isinstance(item, str):
            item = {"command": item}
        if not isinstance(item, dict) or not str(item.get("command", "")).strip():
            raise ValueError(f"script step {index} must name a command")
        args = item.get("args", []) or []
        kwargs = item.get("kwargs", {}) or {}
        if not isinstance(args, list) or not isinstance(kwargs, dict):
            raise ValueError(f"script step {index} has malformed args/kwargs")
        steps.append({"command": str(item["command"]).strip().lower(), "args": args, "kwargs": kwargs})
    return steps


def initialize_config(path: Path, force: bool = False) -> Path:
    if path.exists() and not force:
        raise FileExistsError(f"config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(DEFAULT_CONFIG_PATH, path)
    return path


def _read_yaml(path: Path, *, kind: str) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{kind} file does not exist: {path}")
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def _interpolate_env(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _interpolate_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    if isinstance(value, str) and "${" in value:
        return _ENV_TOKEN_RE.sub(_resolve_token, value)
    return value


def _resolve_token(match: re.Match[str]) -> str:
    name, default = match.group(1), match.group(2)
    resolved = os.environ.get(name)
    if resolved is not None:
        return resolved
    if default is not None:
        return default
    raise ValueError(f"missing required environment variable '{name}' referenced by '{match.group(0)}'")
