from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from .errors import UpstreamNetworkError, UpstreamTimeoutError

log = structlog.get_logger()


class BoundedHttpCaller:
    """
    Single-shot POST with a hard wall-clock deadline.

    httpx timeouts apply per phase (connect, read, ...), so the whole exchange
    is additionally wrapped in an asyncio deadline. When it fires, the request
    task is cancelled, which closes the underlying connection. Non-2xx
    responses are returned as-is; only transport failures and timeouts raise.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self._client = client or httpx.AsyncClient()
        self._clock: Callable[[], float] = clock or time.monotonic

    async def close(self) -> None:
        await self._client.aclose()

    async def post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        json: Any,
        timeout_ms: int,
    ) -> httpx.Response:
        timeout_seconds = max(0.0, timeout_ms / 1000.0)
        started = self._clock()
        try:
            resp = await asyncio.wait_for(
                self._client.post(url, headers=headers, json=json, timeout=timeout_seconds),
                timeout=timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            log.info("upstream_timeout", url=url, timeout_ms=timeout_ms)
            raise UpstreamTimeoutError(f"Timed out after {timeout_ms} ms") from e
        except httpx.HTTPError as e:
            log.info("upstream_network_error", url=url, error=str(e))
            raise UpstreamNetworkError(f"Request failed: {e.__class__.__name__}: {e}") from e

        log.debug(
            "upstream_response",
            url=url,
            status_code=resp.status_code,
            elapsed_ms=int((self._clock() - started) * 1000),
        )
        return resp
