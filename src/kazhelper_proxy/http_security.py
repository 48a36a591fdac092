from __future__ import annotations

import re
import uuid

import structlog

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{8,128}$")


def coerce_request_id(value: str | None) -> str:
    if value and _REQUEST_ID_RE.fullmatch(value):
        return value
    return uuid.uuid4().hex


def _is_api_path(path: str) -> bool:
    return path.startswith("/api/")


def install_middlewares(app, *, cfg) -> None:
    """
    Install request-id, CORS, response header and body-size middleware.

    CORS on ``/api/`` allows any origin, and OPTIONS there is always answered
    with an empty 200.
    """
    from fastapi.responses import JSONResponse, Response
    from starlette.middleware.base import BaseHTTPMiddleware
    from starlette.requests import Request

    from .schemas import make_error_reply

    class RequestIdMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            request_id = coerce_request_id(request.headers.get("x-request-id"))
            request.state.request_id = request_id
            structlog.contextvars.bind_contextvars(request_id=request_id)
            try:
                response = await call_next(request)
            finally:
                structlog.contextvars.clear_contextvars()
            response.headers.setdefault("X-Request-Id", request_id)
            return response

    class PermissiveCorsMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            if not _is_api_path(request.url.path):
                return await call_next(request)
            if request.method == "OPTIONS":
                return Response(status_code=200, headers=CORS_HEADERS)
            response = await call_next(request)
            for name, value in CORS_HEADERS.items():
                response.headers.setdefault(name, value)
            return response

    class ResponseHeadersMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            response = await call_next(request)
            response.headers.setdefault("X-Content-Type-Options", "nosniff")
            if _is_api_path(request.url.path):
                response.headers.setdefault("Cache-Control", "no-store")
            return response

    class MaxBodySizeMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            limit = int(getattr(cfg, "max_request_body_bytes", 0) or 0)
            if limit > 0 and request.method == "POST" and _is_api_path(request.url.path):
                content_length = request.headers.get("content-length")
                too_large = bool(content_length and content_length.isdigit() and int(content_length) > limit)
                if not too_large:
                    too_large = len(await request.body()) > limit
                if too_large:
                    return JSONResponse(status_code=413, content=make_error_reply("Request body too large"))
            return await call_next(request)

    app.add_middleware(MaxBodySizeMiddleware)
    app.add_middleware(ResponseHeadersMiddleware)
    app.add_middleware(PermissiveCorsMiddleware)
    # Outermost so X-Request-Id is set even when inner middleware short-circuits.
    app.add_middleware(RequestIdMiddleware)
