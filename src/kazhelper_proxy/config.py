from __future__ import annotations

import os

from pydantic import BaseModel, Field

from .contracts import ProviderConfig

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"
DEEPSEEK_CHAT_URL = "https://api.deepseek.com/chat/completions"


def _env_str(name: str, default: str | None = None) -> str | None:
    # Empty strings count as unset so a blank secret disables the provider.
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


class ProxyConfig(BaseModel):
    # Primary upstream (Groq, OpenAI-compatible)
    groq_api_key: str | None = Field(default_factory=lambda: _env_str("GROQ_API_KEY"))
    groq_model: str = Field(default_factory=lambda: _env_str("GROQ_MODEL", "llama-3.3-70b-versatile"))
    groq_api_url: str = Field(default_factory=lambda: _env_str("GROQ_API_URL", GROQ_CHAT_URL))
    groq_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("GROQ_TIMEOUT_MS", "6500")))

    # Secondary upstream (DeepSeek)
    deepseek_api_key: str | None = Field(default_factory=lambda: _env_str("DEEPSEEK_API_KEY"))
    deepseek_model: str = Field(default_factory=lambda: _env_str("DEEPSEEK_MODEL", "deepseek-chat"))
    deepseek_api_url: str = Field(default_factory=lambda: _env_str("DEEPSEEK_API_URL", DEEPSEEK_CHAT_URL))
    deepseek_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("DEEPSEEK_TIMEOUT_MS", "8500")))

    temperature: float = Field(default_factory=lambda: float(os.getenv("UPSTREAM_TEMPERATURE", "0.4")))

    # Observability
    enable_metrics: bool = Field(
        default_factory=lambda: os.getenv("ENABLE_METRICS", "false").lower() == "true"
    )
    metrics_bind: str = Field(default_factory=lambda: os.getenv("METRICS_BIND", "127.0.0.1"))
    metrics_port: int = Field(default_factory=lambda: int(os.getenv("METRICS_PORT", "9109")))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = Field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))

    # Server
    enable_api_docs: bool = Field(
        default_factory=lambda: os.getenv("ENABLE_API_DOCS", "false").lower() == "true"
    )
    max_request_body_bytes: int = Field(
        default_factory=lambda: int(os.getenv("MAX_REQUEST_BODY_BYTES", str(1024 * 1024)))
    )

    def providers(self) -> tuple[ProviderConfig, ProviderConfig]:
        """Return (primary, secondary) in fallback order."""
        primary = ProviderConfig(
            name="GROQ",
            endpoint_url=self.groq_api_url,
            api_key=self.groq_api_key or None,
            model=self.groq_model,
            timeout_ms=self.groq_timeout_ms,
            temperature=self.temperature,
        )
        secondary = ProviderConfig(
            name="DEEPSEEK",
            endpoint_url=self.deepseek_api_url,
            api_key=self.deepseek_api_key or None,
            model=self.deepseek_model,
            timeout_ms=self.deepseek_timeout_ms,
            temperature=self.temperature,
        )
        return primary, secondary

    def secrets(self) -> list[str]:
        return [s for s in (self.groq_api_key, self.deepseek_api_key) if s]
