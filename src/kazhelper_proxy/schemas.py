from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .contracts import CompletionRequest


class ConversationMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequestBody(BaseModel):
    """Inbound body for ``POST /api/chat``.

    Deliberately loose: ``messages`` is only checked for being a list and its
    elements are forwarded upstream as-is. Missing or empty ``targetLang`` and
    ``style`` fall back to ``kk`` and ``normal``.
    """

    model_config = ConfigDict(extra="ignore")

    messages: list[Any] = Field(default_factory=list)
    target_lang: str = Field(default="kk", alias="targetLang")
    style: str = "normal"

    @field_validator("messages", mode="before")
    @classmethod
    def _coerce_messages(cls, v: Any) -> list[Any]:
        if isinstance(v, (list, tuple)):
            return list(v)
        return []

    @field_validator("target_lang", mode="before")
    @classmethod
    def _coerce_target_lang(cls, v: Any) -> str:
        if not v:
            return "kk"
        return v if isinstance(v, str) else str(v)

    @field_validator("style", mode="before")
    @classmethod
    def _coerce_style(cls, v: Any) -> str:
        if not v:
            return "normal"
        return v if isinstance(v, str) else str(v)

    @classmethod
    def from_payload(cls, payload: Any) -> "ChatRequestBody":
        # A JSON body that is not an object carries no fields.
        return cls.model_validate(payload if isinstance(payload, dict) else {})

    def to_completion_request(self) -> CompletionRequest:
        return CompletionRequest(
            messages=tuple(self.messages),
            target_language=self.target_lang,
            style=self.style,
        )


class ChatReply(BaseModel):
    text: str
    engine: str


class ErrorReply(BaseModel):
    error: str


def make_error_reply(message: str) -> dict[str, str]:
    return ErrorReply(error=message).model_dump()
