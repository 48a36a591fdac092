from __future__ import annotations

import json
import os
import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .bounded_http import BoundedHttpCaller
from .config import ProxyConfig
from .errors import InvalidRequestError, ProviderError, TotalFailureError
from .fallback import FallbackOrchestrator
from .http_security import CORS_HEADERS, install_middlewares
from .logging import configure_logging
from .metrics import maybe_start_metrics, server_errors_total, server_request_latency_seconds, server_requests_total
from .schemas import ChatReply, ChatRequestBody, make_error_reply

log = structlog.get_logger()

CHAT_PATH = "/api/chat"


def create_app(cfg: ProxyConfig | None = None, orchestrator: FallbackOrchestrator | None = None):
    cfg = cfg or ProxyConfig()
    configure_logging(level=cfg.log_level, fmt=cfg.log_format, secrets=cfg.secrets())

    caller: BoundedHttpCaller | None = None
    if orchestrator is None:
        caller = BoundedHttpCaller()
        orchestrator = FallbackOrchestrator.from_config(cfg, caller=caller)

    def _observe(path: str, status_code: int, started_at: float) -> None:
        server_requests_total.labels(path=path, status=str(status_code)).inc()
        server_request_latency_seconds.labels(path=path).observe(max(0.0, time.monotonic() - started_at))

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        maybe_start_metrics(enable=cfg.enable_metrics, bind=cfg.metrics_bind, port=cfg.metrics_port)
        primary, secondary = cfg.providers()
        log.info(
            "proxy_started",
            providers=[
                {"name": p.name, "model": p.model, "configured": p.api_key_present} for p in (primary, secondary)
            ],
        )
        try:
            yield
        finally:
            if caller is not None:
                await caller.close()

    app = FastAPI(
        title="kazhelper-proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if cfg.enable_api_docs else None,
        redoc_url="/redoc" if cfg.enable_api_docs else None,
        openapi_url="/openapi.json" if cfg.enable_api_docs else None,
    )
    install_middlewares(app, cfg=cfg)

    @app.exception_handler(InvalidRequestError)
    async def _invalid_request_handler(_request, exc: InvalidRequestError):
        server_errors_total.labels(type="invalid_request").inc()
        return JSONResponse(status_code=400, content=make_error_reply(str(exc)))

    @app.exception_handler(TotalFailureError)
    async def _total_failure_handler(_request, exc: TotalFailureError):
        server_errors_total.labels(type="total_failure").inc()
        return JSONResponse(status_code=500, content=make_error_reply(str(exc)))

    @app.exception_handler(ProviderError)
    async def _provider_error_handler(_request, exc: ProviderError):
        server_errors_total.labels(type="provider_error").inc()
        return JSONResponse(status_code=500, content=make_error_reply(str(exc)))

    @app.exception_handler(Exception)
    async def _unexpected_error_handler(_request, exc: Exception):
        server_errors_total.labels(type="internal").inc()
        log.exception("unhandled_error", error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content=make_error_reply("Internal error"), headers=CORS_HEADERS)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(CHAT_PATH, response_model=ChatReply)
    async def chat(request: Request):
        started_at = time.monotonic()
        raw = await request.body()
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError) as e:
            _observe(CHAT_PATH, 400, started_at)
            raise InvalidRequestError("Invalid JSON") from e

        body = ChatRequestBody.from_payload(payload)
        try:
            result = await orchestrator.complete(body.to_completion_request())
        except ProviderError:
            _observe(CHAT_PATH, 500, started_at)
            raise

        _observe(CHAT_PATH, 200, started_at)
        log.info(
            "chat_completed",
            engine=result.engine_name,
            target_lang=body.target_lang,
            style=body.style,
            latency_ms=int(result.latency_seconds * 1000),
        )
        return ChatReply(text=result.text, engine=result.engine_name)

    return app


app = create_app()


def main() -> None:  # pragma: no cover
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").lower() == "true"
    uvicorn.run("kazhelper_proxy.server:app", host=host, port=port, reload=reload)


if __name__ == "__main__":  # pragma: no cover
    main()
