import json

import httpx
import pytest

from kazhelper_proxy import ChatProvider, ProviderConfig
from kazhelper_proxy.bounded_http import BoundedHttpCaller
from kazhelper_proxy.errors import ProviderUnconfiguredError, UpstreamHTTPError


def _cfg(api_key: str | None = "gsk-test") -> ProviderConfig:
    return ProviderConfig(
        name="GROQ",
        endpoint_url="https://api.groq.example/openai/v1/chat/completions",
        api_key=api_key,
        model="llama-3.3-70b-versatile",
        timeout_ms=1000,
    )


@pytest.mark.asyncio
async def test_provider_posts_openai_payload_with_bearer_token():
    observed = {}

    def handler(request: httpx.Request) -> httpx.Response:
        observed["auth"] = request.headers.get("authorization")
        observed["content_type"] = request.headers.get("content-type")
        observed["body"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(200, json={"choices": [{"message": {"content": "Рахмет!"}}]})

    caller = BoundedHttpCaller(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    p = ChatProvider(_cfg(), caller=caller)
    messages = [{"role": "system", "content": "sys"}, {"role": "user", "content": "Thanks"}]
    try:
        out = await p.complete(messages)
    finally:
        await caller.close()

    assert out == "Рахмет!"
    assert observed["auth"] == "Bearer gsk-test"
    assert observed["content_type"] == "application/json"
    assert observed["body"] == {
        "model": "llama-3.3-70b-versatile",
        "messages": messages,
        "temperature": 0.4,
    }


@pytest.mark.asyncio
async def test_unconfigured_provider_never_touches_network():
    calls = {"n": 0}

    def handler(_: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(200, json={"text": "should not happen"})

    caller = BoundedHttpCaller(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    p = ChatProvider(_cfg(api_key=None), caller=caller)
    try:
        with pytest.raises(ProviderUnconfiguredError) as exc:
            await p.complete([{"role": "user", "content": "hi"}])
    finally:
        await caller.close()
    assert str(exc.value) == "not configured"
    assert calls["n"] == 0


@pytest.mark.asyncio
async def test_provider_surfaces_upstream_http_error():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Invalid API Key"}})

    caller = BoundedHttpCaller(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    p = ChatProvider(_cfg(), caller=caller)
    try:
        with pytest.raises(UpstreamHTTPError, match="Invalid API Key"):
            await p.complete([{"role": "user", "content": "hi"}])
    finally:
        await caller.close()
