from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    endpoint_url: str
    api_key: str | None
    model: str
    timeout_ms: int
    temperature: float = 0.4

    @property
    def api_key_present(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class CompletionRequest:
    messages: tuple[Any, ...]
    target_language: str = "kk"
    style: str = "normal"


@dataclass(frozen=True)
class CompletionResult:
    text: str
    engine_name: str
    latency_seconds: float = 0.0


@dataclass(frozen=True)
class CompletionFailure:
    provider_name: str
    message: str
