from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from .config import Settings, get_settings
from .pipeline import AnalysisGateway, Generator, RequestEnvelope
from .responses import ResponseEnvelope


def to_http_response(envelope: ResponseEnvelope) -> Response:
    if envelope.body is None:
        return Response(status_code=envelope.status_code, headers=envelope.headers)
    return JSONResponse(envelope.body, status_code=envelope.status_code, headers=envelope.headers)


def _declared_length(request: Request) -> int | None:
    raw = (request.headers.get("content-length") or "").strip()
    try:
        return int(raw)
    except ValueError:
        return None


async def read_capped_body(request: Request, max_bytes: int) -> tuple[bytes, bool]:
    """Read at most ``max_bytes`` of the body; the flag reports anything beyond it."""
    declared = _declared_length(request)
    if declared is not None and declared > max_bytes:
        return b"", True
    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > max_bytes:
            return b"", True
        chunks.append(chunk)
    return b"".join(chunks), False


def create_app(settings: Settings | None = None, generator: Generator | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    gateway = AnalysisGateway(settings, generator=generator)
    app = FastAPI(title="BTA Analysis Gateway")
    app.state.gateway = gateway

    async def bta_analysis(request: Request) -> Response:
        raw_body, oversized = await read_capped_body(request, settings.max_body_bytes)
        envelope = RequestEnvelope(
            method=request.method,
            origin=request.headers.get("origin", ""),
            raw_body=raw_body,
            oversized=oversized,
        )
        result = await run_in_threadpool(gateway.handle, envelope)
        return to_http_response(result)

    # methods=None lets every verb reach the method gate instead of the router's own 405.
    # No CORSMiddleware: the gateway computes its own headers on every path.
    app.add_route(settings.route_path, bta_analysis, methods=None, include_in_schema=False)

    return app
