import json
import logging
from contextlib import asynccontextmanager
from typing import Any

import socketio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from .catalog import FLOWS, Flow
from .config import Settings
from .llm import InvalidModelJSON, MissingCredentials
from .relay import SessionRegistry
from .signalling import create_signalling_server
from .speech import Synthesizer

logger = logging.getLogger(__name__)

MODEL_FAILURE_MESSAGES = {
    "json_decode": "Model returned invalid JSON",
    "schema_validation": "Model returned JSON that didn't match schema",
    "empty_output": "Model returned empty output",
}


def flatten_errors(exc: ValidationError) -> dict[str, Any]:
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if not loc:
            form_errors.append(error["msg"])
            continue
        field_errors.setdefault(".".join(loc), []).append(error["msg"])
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def _error(status: int, message: str, details: Any | None = None) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(body, status_code=status)


def _flow_endpoint(flow: Flow, settings: Settings, client: Any | None, synthesizer: Synthesizer | None):
    async def endpoint(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _error(400, "Invalid request body", {"formErrors": ["Body must be valid JSON"], "fieldErrors": {}})

        try:
            data = flow.input_model.model_validate(body)
        except ValidationError as exc:
            return _error(400, "Invalid request body", flatten_errors(exc))

        try:
            result = await run_in_threadpool(
                flow.run,
                data,
                client=client,
                settings=settings,
                synthesizer=synthesizer,
            )
        except InvalidModelJSON as exc:
            logger.error("error in /api/%s: %s", flow.name, exc)
            return _error(500, MODEL_FAILURE_MESSAGES.get(exc.kind, "Model output validation failed"))
        except MissingCredentials as exc:
            logger.error("error in /api/%s: %s", flow.name, exc)
            return _error(500, str(exc))
        except Exception as exc:
            logger.exception("error in /api/%s", flow.name)
            return _error(500, str(exc) or "Unexpected error")

        return JSONResponse(result.output.model_dump(by_alias=True))

    endpoint.__name__ = flow.name.replace("-", "_")
    return endpoint


def create_app(
    settings: Settings | None = None,
    *,
    client: Any | None = None,
    synthesizer: Synthesizer | None = None,
    registry: SessionRegistry | None = None,
) -> FastAPI:
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if registry is not None:
            registry.clear()

    app = FastAPI(title="Eduko API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for flow in FLOWS.values():
        app.add_api_route(
            f"/api/{flow.name}",
            _flow_endpoint(flow, settings, client, synthesizer),
            methods=["POST"],
            summary=flow.description,
        )

    @app.get("/health")
    async def health():
        status: dict[str, Any] = {"status": "ok", "flows": sorted(FLOWS)}
        if registry is not None:
            status["relay"] = {"peers": len(registry), "sessions": len(registry.sessions())}
        return status

    return app


def create_asgi_app(
    settings: Settings | None = None,
    *,
    client: Any | None = None,
    synthesizer: Synthesizer | None = None,
) -> socketio.ASGIApp:
    """HTTP flows and the signalling relay served from one process."""
    settings = settings or Settings()
    registry = SessionRegistry(max_peers_per_session=settings.max_peers_per_session)
    sio = create_signalling_server(registry)
    app = create_app(settings, client=client, synthesizer=synthesizer, registry=registry)
    return socketio.ASGIApp(sio, other_asgi_app=app)


def create_relay_app(settings: Settings | None = None) -> socketio.ASGIApp:
    settings = settings or Settings()
    registry = SessionRegistry(max_peers_per_session=settings.max_peers_per_session)
    return socketio.ASGIApp(create_signalling_server(registry), on_shutdown=registry.clear)
