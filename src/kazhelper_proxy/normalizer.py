"""Completion text extraction for OpenAI-compatible upstream responses.

Groq and DeepSeek both follow the chat-completions shape but differ in
details, so instead of branching per provider the normalizer walks an ordered
list of candidate locations and takes the first non-empty string.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from .errors import EmptyResponseError, UpstreamHTTPError

RAW_SNIPPET_CHARS = 300

# Checked in order; first non-empty string wins.
_TEXT_PATHS: tuple[tuple[str | int, ...], ...] = (
    ("choices", 0, "message", "content"),
    ("choices", 0, "text"),
    ("text",),
)


def _dig(data: Any, path: tuple[str | int, ...]) -> Any:
    node = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or len(node) <= step:
                return None
        elif not isinstance(node, dict):
            return None
        node = node[step] if isinstance(step, int) else node.get(step)
    return node


def parse_body(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return {"error": raw[:RAW_SNIPPET_CHARS]}


def error_detail(data: Any) -> str | None:
    """Best-effort error message from an upstream payload."""
    nested = _dig(data, ("error", "message"))
    if nested:
        return nested if isinstance(nested, str) else str(nested)
    err = _dig(data, ("error",))
    if isinstance(err, str):
        return err or None
    if err:
        return json.dumps(err, ensure_ascii=False, separators=(",", ":"))[:RAW_SNIPPET_CHARS]
    return None


def extract_text(data: Any) -> str | None:
    for path in _TEXT_PATHS:
        value = _dig(data, path)
        if isinstance(value, str) and value:
            return value
    return None


def extract_completion_text(resp: httpx.Response) -> str:
    raw = resp.text
    data = parse_body(raw)

    if not resp.is_success:
        raise UpstreamHTTPError(resp.status_code, error_detail(data) or f"HTTP {resp.status_code}")

    text = extract_text(data)
    if text is None:
        detail = error_detail(data)
        raise EmptyResponseError(f"Empty response text: {detail}" if detail else "Empty response text")
    return text
