from __future__ import annotations

from typing import Any

from .schemas import ConversationMessage

PERSONA = "You are a travel translation and phrase assistant for Kazakhstan."
PHRASE_HINT = "When helpful, output short, ready-to-say phrases."

LANGUAGE_RULES = {
    "kk": "Reply ONLY in Kazakh. Never use English.",
    "ru": "Reply ONLY in Russian. Never use English.",
}
DEFAULT_LANGUAGE_RULE = "Reply ONLY in Simplified Chinese. Never use English."

STYLE_RULES = {
    "concise": "Be concise.",
    "polite": "Be polite.",
}
DEFAULT_STYLE_RULE = "Be natural and helpful."


def language_rule(target_language: Any) -> str:
    # zh and anything unrecognized share the Chinese directive.
    if not isinstance(target_language, str):
        return DEFAULT_LANGUAGE_RULE
    return LANGUAGE_RULES.get(target_language, DEFAULT_LANGUAGE_RULE)


def style_rule(style: Any) -> str:
    if not isinstance(style, str):
        return DEFAULT_STYLE_RULE
    return STYLE_RULES.get(style, DEFAULT_STYLE_RULE)


def build_system_instruction(target_language: Any, style: Any) -> str:
    return " ".join([PERSONA, language_rule(target_language), style_rule(style), PHRASE_HINT])


def compose_messages(raw_messages: Any, target_language: Any, style: Any) -> list[Any]:
    """Prefix the caller's history with the synthesized system message.

    Caller messages are passed through untouched; anything that is not a
    list or tuple is treated as an empty history.
    """
    history = list(raw_messages) if isinstance(raw_messages, (list, tuple)) else []
    system = ConversationMessage(role="system", content=build_system_instruction(target_language, style))
    return [system.model_dump(), *history]
