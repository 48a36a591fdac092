import pytest
import httpx

from kazhelper_proxy import FallbackOrchestrator, ProxyConfig


class _ExplodingProvider:
    def __init__(self, name: str):
        self.name = name

    async def complete(self, messages):
        raise AssertionError("provider must not be called")


def _app(**cfg_kwargs):
    from kazhelper_proxy.server import create_app

    cfg = ProxyConfig(enable_metrics=False, **cfg_kwargs)
    orch = FallbackOrchestrator(_ExplodingProvider("GROQ"), _ExplodingProvider("DEEPSEEK"))
    return create_app(cfg=cfg, orchestrator=orch)


@pytest.mark.asyncio
async def test_options_preflight_returns_empty_body_with_cors_headers():
    pytest.importorskip("fastapi")

    transport = httpx.ASGITransport(app=_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.options("/api/chat")
        assert resp.status_code in (200, 204)
        assert resp.content == b""
        assert resp.headers.get("access-control-allow-origin") == "*"
        assert resp.headers.get("access-control-allow-methods") == "POST,OPTIONS"
        assert resp.headers.get("access-control-allow-headers") == "Content-Type, Authorization"


@pytest.mark.asyncio
async def test_browser_preflight_is_answered_the_same_way():
    pytest.importorskip("fastapi")

    transport = httpx.ASGITransport(app=_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.options(
            "/api/chat",
            headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
        )
        assert resp.status_code in (200, 204)
        assert resp.headers.get("access-control-allow-origin") == "*"


@pytest.mark.asyncio
async def test_error_responses_carry_cors_headers():
    pytest.importorskip("fastapi")

    transport = httpx.ASGITransport(app=_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.post("/api/chat", content=b"][", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.headers.get("access-control-allow-origin") == "*"
        assert resp.headers.get("Cache-Control") == "no-store"
        assert resp.headers.get("X-Content-Type-Options") == "nosniff"


@pytest.mark.asyncio
async def test_server_enforces_max_body_size_413():
    pytest.importorskip("fastapi")

    transport = httpx.ASGITransport(app=_app(max_request_body_bytes=60))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        payload = b'{"messages":[{"role":"user","content":"' + (b"x" * 200) + b'"}]}'
        resp = await client.post(
            "/api/chat",
            content=payload,
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 413
        assert resp.json() == {"error": "Request body too large"}
        assert resp.headers.get("access-control-allow-origin") == "*"
