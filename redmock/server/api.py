"""FastAPI front end that executes engine commands against shared storage areas."""

from __future__ import annotations

from typing import Any

try:
    from fastapi import FastAPI, HTTPException, Request
except Exception:  # pragma: no cover - optional dependency
    FastAPI = None  # type: ignore[assignment]
    HTTPException = RuntimeError  # type: ignore[assignment]
    Request = Any  # type: ignore[assignment]

from redmock.config.schema import AppConfig
from redmock.core.logging import get_logger
from redmock.engine import RedisMock
from redmock.errors import InvalidArgumentError, UnsupportedOperationError
from redmock.keyspace.store import DEFAULT_STORAGE, StorageRegistry


DEFAULT_STORAGE_ALIAS = "-"
COMMAND_ALIASES = {"del": "delete"}


def storage_name(raw: str) -> str:
    return DEFAULT_STORAGE if raw == DEFAULT_STORAGE_ALIAS else raw


def create_app(registry: StorageRegistry | None = None, config: AppConfig | None = None) -> Any:
    if FastAPI is None:
        raise RuntimeError("FastAPI is not installed. Install with: pip install 'redmock[api]'")

    app_config = config or AppConfig()
    shared = registry if registry is not None else StorageRegistry()
    for name in app_config.engine.storages:
        shared.select(name)
    docs_enabled = bool(app_config.api.docs_enabled)
    max_batch_commands = int(app_config.api.max_batch_commands)
    scan_count = int(app_config.engine.scan_count)
    dispatchable = set(RedisMock.command_names())
    queueable = set(RedisMock.command_names(queued_only=True))
    logger = get_logger("redmock.server")

    app = FastAPI(
        title="redmock API",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.registry = shared

    def _engine(name: str) -> RedisMock:
        return RedisMock(shared, storage=storage_name(name), scan_count=scan_count)

    async def _read_payload(request: Request) -> Any:
        try:
            return await request.json()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="request body must be valid JSON") from exc

    def _command_call(raw: Any) -> tuple[str, list[Any], dict[str, Any]]:
        if not isinstance(raw, dict):
            raise HTTPException(status_code=400, detail="command payload must be an object")
        name = str(raw.get("command", "")).strip().lower()
        name = COMMAND_ALIASES.get(name, name)
        args = raw.get("args", []) or []
        kwargs = raw.get("kwargs", {}) or {}
        if not isinstance(args, list):
            raise HTTPException(status_code=400, detail="'args' must be a list")
        if not isinstance(kwargs, dict):
            raise HTTPException(status_code=400, detail="'kwargs' must be an object")
        if name not in dispatchable:
            raise HTTPException(status_code=404, detail=f"unknown command '{name}'")
        return name, args, kwargs

    def _dispatch(engine: RedisMock, name: str, args: list[Any], kwargs: dict[str, Any]) -> Any:
        try:
            return getattr(engine, name)(*args, **kwargs)
        except InvalidArgumentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except UnsupportedOperationError as exc:
            raise HTTPException(status_code=501, detail=str(exc)) from exc
        except TypeError as exc:
            raise HTTPException(status_code=400, detail=f"bad arguments for '{name}': {exc}") from exc

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/storages")
    def storages() -> dict[str, Any]:
        rows = []
        for name in shared.names():
            rows.append({"name": name, "keys": _engine(name).dbsize()})
        return {"storages": rows}

    @app.get("/commands")
    def commands() -> dict[str, Any]:
        return {"commands": sorted(dispatchable), "queueable": sorted(queueable)}

    @app.post("/storages/{name}/commands")
    async def run_command(name: str, request: Request) -> dict[str, Any]:
        command, args, kwargs = _command_call(await _read_payload(request))
        result = _dispatch(_engine(name), command, args, kwargs)
        return {"result": result}

    @app.post("/storages/{name}/transaction")
    async def run_transaction(name: str, request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        if isinstance(payload, dict):
            payload = payload.get("commands", [])
        if not isinstance(payload, list):
            raise HTTPException(status_code=400, detail="transaction payload must be a list of commands")
        if len(payload) > max_batch_commands:
            raise HTTPException(
                status_code=400,
                detail=f"transaction exceeds the limit of {max_batch_commands} commands",
            )
        calls = [_command_call(item) for item in payload]
        for command, _args, _kwargs in calls:
            if command not in queueable:
                raise HTTPException(status_code=400, detail=f"command '{command}' cannot be queued")

        engine = _engine(name)
        area = shared.select(storage_name(name))
        # Like EXEC: a failing command fills its own slot, the rest still apply.
        failures: dict[int, dict[str, Any]] = {}
        with area.lock:
            engine.multi()
            for index, (command, args, kwargs) in enumerate(calls):
                try:
                    _dispatch(engine, command, args, kwargs)
                except HTTPException as exc:
                    failures[index] = {"error": exc.detail, "status": exc.status_code}
            replies = iter(engine.exec())
        results = [failures[index] if index in failures else next(replies) for index in range(len(calls))]
        logger.info(
            "transaction executed",
            extra={
                "service": "server",
                "storage": area.name,
                "event_action": "transaction",
                "event_outcome": "failure" if failures else "success",
                "payload": {"commands": len(calls), "failed": len(failures)},
            },
        )
        return {"results": results}

    @app.delete("/storages/{name}")
    def flush_storage(name: str) -> dict[str, Any]:
        return {"result": _engine(name).flushdb()}

    return app
