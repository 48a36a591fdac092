from kazhelper_proxy.logging import redact, redact_text


def test_redact_text_masks_known_secrets_and_bearer_tokens():
    out = redact_text("key=abc123secret auth=Bearer gsk_live_token_value", secrets=["abc123secret"])
    assert "abc123secret" not in out
    assert "gsk_live_token_value" not in out
    assert "Bearer [REDACTED]" in out


def test_redact_text_masks_provider_key_shapes():
    out = redact_text("upstream echoed sk-0123456789abcdef0123 back", secrets=[])
    assert "sk-0123456789abcdef0123" not in out


def test_redact_masks_sensitive_keys_recursively():
    event = {
        "event": "provider_attempt_failed",
        "headers": {"Authorization": "Bearer whatever", "Content-Type": "application/json"},
        "groq_api_key": "gsk-test",
        "items": [{"token": "t"}, "plain"],
    }
    out = redact(event, secrets=[])
    assert out["headers"]["Authorization"] == "[REDACTED]"
    assert out["headers"]["Content-Type"] == "application/json"
    assert out["groq_api_key"] == "[REDACTED]"
    assert out["items"] == [{"token": "[REDACTED]"}, "plain"]
    assert out["event"] == "provider_attempt_failed"


def test_redact_leaves_ordinary_fields_alone():
    out = redact({"provider": "GROQ", "model": "deepseek-chat", "cookie": "c"}, secrets=[])
    assert out == {"provider": "GROQ", "model": "deepseek-chat", "cookie": "c"}
