from __future__ import annotations

import time
from typing import Any

import structlog

from .bounded_http import BoundedHttpCaller
from .contracts import ProviderConfig
from .errors import ProviderError, ProviderUnconfiguredError
from .metrics import provider_attempts_total, provider_latency_seconds
from .normalizer import extract_completion_text

log = structlog.get_logger()


class ChatProvider:
    """One OpenAI-compatible chat-completions upstream."""

    def __init__(self, cfg: ProviderConfig, *, caller: BoundedHttpCaller):
        self.cfg = cfg
        self.caller = caller

    @property
    def name(self) -> str:
        return self.cfg.name

    def build_payload(self, messages: list[Any]) -> dict[str, Any]:
        return {
            "model": self.cfg.model,
            "messages": messages,
            "temperature": self.cfg.temperature,
        }

    async def complete(self, messages: list[Any]) -> str:
        if not self.cfg.api_key_present:
            provider_attempts_total.labels(provider=self.name, outcome="unconfigured").inc()
            raise ProviderUnconfiguredError()

        start = time.time()
        try:
            with provider_latency_seconds.labels(provider=self.name).time():
                resp = await self.caller.post(
                    self.cfg.endpoint_url,
                    headers={
                        "Content-Type": "application/json",
                        "Authorization": f"Bearer {self.cfg.api_key}",
                    },
                    json=self.build_payload(messages),
                    timeout_ms=self.cfg.timeout_ms,
                )
            text = extract_completion_text(resp)
        except ProviderError as e:
            provider_attempts_total.labels(provider=self.name, outcome=type(e).__name__).inc()
            log.warning("provider_attempt_failed", provider=self.name, error_type=type(e).__name__, error=str(e))
            raise

        provider_attempts_total.labels(provider=self.name, outcome="success").inc()
        log.info(
            "provider_attempt_ok",
            provider=self.name,
            model=self.cfg.model,
            latency_ms=int((time.time() - start) * 1000),
            text_chars=len(text),
        )
        return text
