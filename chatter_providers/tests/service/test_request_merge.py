from __future__ import annotations

from chatter_providers.base.cancellation import CancellationToken
from chatter_providers.base.models import ChatRequest, Message, ModelConfig
from chatter_providers.service import merge_model_config

CONFIG = ModelConfig(
    id="team-model",
    provider="groq",
    api_type="openai-chat-completions",
    base_url="https://api.groq.com/openai/v1",
    custom_headers={"X-Team": "core", "X-Env": "prod"},
    custom_body_params={"seed": 1, "top_k": 10},
)


def _request(**kwargs) -> ChatRequest:
    return ChatRequest.fresh("team-model", [Message("user", "Hi")], **kwargs)


def test_request_values_win_key_by_key():
    merged = merge_model_config(
        _request(
            api_key="gk-live",
            base_url="https://proxy.local/v1",
            custom_headers={"X-Env": "dev"},
            custom_body_params={"seed": 7},
        ),
        CONFIG,
    )
    assert merged.base_url == "https://proxy.local/v1"  # nosec B101 - assert is appropriate in unit tests
    assert merged.custom_headers == {"X-Team": "core", "X-Env": "dev"}  # nosec B101
    assert merged.custom_body_params == {"seed": 7, "top_k": 10}  # nosec B101
    assert merged.api_key == "gk-live"  # nosec B101


def test_config_defaults_fill_gaps(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gk-from-env")
    token = CancellationToken()
    merged = merge_model_config(_request(cancellation=token), CONFIG)
    assert merged.base_url == "https://api.groq.com/openai/v1"  # nosec B101
    assert merged.api_key == "gk-from-env"  # nosec B101
    assert merged.cancellation is token  # nosec B101


def test_missing_key_stays_empty(monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    assert merge_model_config(_request(), CONFIG).api_key == ""  # nosec B101
