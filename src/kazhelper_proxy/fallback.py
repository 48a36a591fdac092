"""Primary-then-secondary provider fallback.

Every request starts fresh in ``PRIMARY``. Any provider error moves it to
``SECONDARY``; a second failure ends with a ``TotalFailureError`` naming both
providers and their messages. Attempts never overlap and nothing is retained
between requests.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Protocol

import structlog

from .bounded_http import BoundedHttpCaller
from .config import ProxyConfig
from .contracts import CompletionFailure, CompletionRequest, CompletionResult
from .errors import ProviderError, TotalFailureError
from .metrics import fallback_total
from .prompt import compose_messages
from .provider import ChatProvider

log = structlog.get_logger()


class CompletionProvider(Protocol):
    @property
    def name(self) -> str: ...

    async def complete(self, messages: list[Any]) -> str: ...


class AttemptState(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class FallbackOrchestrator:
    def __init__(self, primary: CompletionProvider, secondary: CompletionProvider):
        self.primary = primary
        self.secondary = secondary

    @classmethod
    def from_config(cls, cfg: ProxyConfig, *, caller: BoundedHttpCaller) -> "FallbackOrchestrator":
        primary, secondary = cfg.providers()
        return cls(ChatProvider(primary, caller=caller), ChatProvider(secondary, caller=caller))

    def _provider_for(self, state: AttemptState) -> CompletionProvider:
        return self.primary if state is AttemptState.PRIMARY else self.secondary

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        messages = compose_messages(request.messages, request.target_language, request.style)
        failures: list[CompletionFailure] = []
        start = time.monotonic()

        for state in (AttemptState.PRIMARY, AttemptState.SECONDARY):
            provider = self._provider_for(state)
            if state is AttemptState.SECONDARY:
                fallback_total.labels(from_provider=self.primary.name).inc()
                log.info("fallback_engaged", from_provider=self.primary.name, to_provider=provider.name)
            try:
                text = await provider.complete(messages)
            except ProviderError as e:
                failures.append(CompletionFailure(provider_name=provider.name, message=str(e) or type(e).__name__))
                continue
            return CompletionResult(
                text=text,
                engine_name=provider.name,
                latency_seconds=time.monotonic() - start,
            )

        log.error(
            "all_providers_failed",
            failures=[{"provider": f.provider_name, "message": f.message} for f in failures],
        )
        raise TotalFailureError(failures)
