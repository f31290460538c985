"""CLI entry point for redmock."""

from __future__ import annotations

import argparse
import ipaddress
import json
from pathlib import Path
from typing import Any, Sequence

from redmock.config.loader import initialize_config, load_config, load_script
from redmock.core.logging import configure_logging
from redmock.engine import RedisMock
from redmock.errors import RedisMockError


def _host_is_loopback(host: str) -> bool:
    normalized = host.strip().lower()
    if normalized == "localhost":
        return True
    try:
        parsed = ipaddress.ip_address(normalized)
    except ValueError:
        return False
    return parsed.is_loopback


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="redmock")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create starter config")
    init_parser.add_argument("--config", type=Path, default=Path("./config/redmock.yml"))
    init_parser.add_argument("--force", action="store_true")

    subparsers.add_parser("commands", help="List the emulated command surface")

    run_parser = subparsers.add_parser("run", help="Execute a YAML list of commands and print the replies")
    run_parser.add_argument("script", type=Path)
    run_parser.add_argument("--config", type=Path, default=None, help="Defaults to $REDMOCK_CONFIG, then the packaged defaults")
    run_parser.add_argument("--storage", type=str, default=None, help="Storage area to run against")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP command server")
    serve_parser.add_argument("--config", type=Path, default=None, help="Defaults to $REDMOCK_CONFIG, then the packaged defaults")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument(
        "--allow-remote",
        action="store_true",
        help="Allow binding to a non-loopback address",
    )

    return parser


def cmd_init(config_path: Path, force: bool) -> int:
    initialize_config(config_path, force=force)
    print(f"wrote config: {config_path}")
    return 0


def cmd_commands() -> int:
    payload = {
        "commands": RedisMock.command_names(),
        "queueable": RedisMock.command_names(queued_only=True),
    }
    print(json.dumps(payload, indent=2))
    return 0


def _serializable(value: Any) -> Any:
    if isinstance(value, RedisMock):
        return "QUEUED"
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return value


def cmd_run(config_path: Path | None, script_path: Path, *, storage: str | None) -> int:
    config = load_config(config_path)
    configure_logging(config.logging)
    engine = RedisMock.from_config(config.engine)
    if storage is not None:
        engine.select_storage(storage)

    allowed = set(RedisMock.command_names()) | {"multi", "exec", "discard", "pipeline", "execute"}
    results: list[dict[str, Any]] = []
    for step in load_script(script_path):
        name = "delete" if step["command"] == "del" else step["command"]
        if name not in allowed:
            raise ValueError(f"unknown command '{step['command']}'")
        try:
            reply = getattr(engine, name)(*step["args"], **step["kwargs"])
        except RedisMockError as exc:
            results.append({"command": name, "error": str(exc)})
            continue
        results.append({"command": name, "result": _serializable(reply)})
    print(json.dumps(results, indent=2, default=str))
    return 0


def cmd_serve(config_path: Path | None, *, host: str | None, port: int | None, allow_remote: bool) -> int:
    config = load_config(config_path)
    configure_logging(config.logging)
    bind_host = host or config.api.host
    bind_port = int(port if port is not None else config.api.port)
    if not _host_is_loopback(bind_host) and not allow_remote:
        raise RuntimeError("refusing to bind the command server to a non-loopback host without --allow-remote")
    try:
        from redmock.server.api import create_app
        import uvicorn
    except Exception as exc:
        raise RuntimeError("server dependencies are missing; install with 'redmock[api]'") from exc

    app = create_app(config=config)
    uvicorn.run(app, host=bind_host, port=bind_port, log_level=config.logging.level.lower())
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        return cmd_init(args.config, args.force)
    if args.command == "commands":
        return cmd_commands()
    if args.command == "run":
        return cmd_run(args.config, args.script, storage=args.storage)
    if args.command == "serve":
        return cmd_serve(args.config, host=args.host, port=args.port, allow_remote=args.allow_remote)

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
