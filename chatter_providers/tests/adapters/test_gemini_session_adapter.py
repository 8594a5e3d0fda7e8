from __future__ import annotations

from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from chatter_providers.adapters import GeminiSessionAdapter
from chatter_providers.base.constants import SESSION_SYSTEM_ACK
from chatter_providers.base.errors import ErrorCode, ProviderError
from chatter_providers.base.models import ApprovalDecision, ChatRequest, GenerationParams, Message
from chatter_providers.base.streaming import CompleteEvent, ErrorEvent, TextDelta, UsageEvent
from chatter_providers.registries import InMemoryAttachmentStore


class FakeChat:
    def __init__(self, chunks=None, response=None, error=None):
        self.chunks = chunks or []
        self.response = response
        self.error = error
        self.sent = []
        self.closed = False

    def send_message_stream(self, parts):
        self.sent.append(parts)
        if self.error is not None:
            raise self.error
        return self._iterate()

    def _iterate(self):
        try:
            yield from self.chunks
        finally:
            self.closed = True

    def send_message(self, parts):
        self.sent.append(parts)
        if self.error is not None:
            raise self.error
        return self.response


class FakeClient:
    def __init__(self, chat: FakeChat):
        self.chat = chat
        self.created = []
        self.chats = SimpleNamespace(create=self._create)

    def _create(self, **kwargs):
        self.created.append(kwargs)
        return self.chat


def _adapter(chat: FakeChat, **kwargs):
    client = FakeClient(chat)
    seen = []

    def factory(request):
        seen.append(request)
        return client

    return GeminiSessionAdapter(client_factory=factory, **kwargs), client, seen


def _chunk(text, usage=None):
    return SimpleNamespace(text=text, usage_metadata=usage)


def test_stream_text_then_usage_then_complete():
    usage = SimpleNamespace(prompt_token_count=7, candidates_token_count=3, total_token_count=10)
    chat = FakeChat(chunks=[_chunk("Hel"), _chunk(None), _chunk("lo", usage)])
    adapter, client, seen = _adapter(chat)
    request = ChatRequest.fresh("gemini-2.5-flash", [Message("user", "Hi")], api_key="g-live")

    events = list(adapter.stream(request))

    assert events == [TextDelta("Hel"), TextDelta("lo"), UsageEvent(7, 3, 10), CompleteEvent()]  # nosec B101 - assert is appropriate in unit tests
    assert seen[0].api_key == "g-live"  # nosec B101
    assert client.created[0]["model"] == "gemini-2.5-flash"  # nosec B101
    assert client.created[0]["history"] == []  # nosec B101
    assert [p.text for p in chat.sent[0]] == ["Hi"]  # nosec B101
    assert chat.closed  # nosec B101


def test_history_emulates_system_prompt_and_maps_roles():
    chat = FakeChat(chunks=[_chunk("ok")])
    adapter, client, _ = _adapter(chat)
    request = ChatRequest.fresh(
        "gemini-2.5-pro",
        [
            Message("system", "be terse"),
            Message("user", "one"),
            Message("assistant", "two"),
            Message("user", "three"),
        ],
        params=GenerationParams(temperature=0.2, max_tokens=64),
        custom_body_params={"top_k": 5, "temperature": 1.0},
    )
    list(adapter.stream(request))

    created = client.created[0]
    history = created["history"]
    assert [c.role for c in history] == ["user", "model", "user", "model"]  # nosec B101
    assert history[0].parts[0].text == "System: be terse"  # nosec B101
    assert history[1].parts[0].text == SESSION_SYSTEM_ACK  # nosec B101
    assert history[2].parts[0].text == "one" and history[3].parts[0].text == "two"  # nosec B101
    assert [p.text for p in chat.sent[0]] == ["three"]  # nosec B101
    config = created["config"]
    assert config.temperature == 0.2 and config.max_output_tokens == 64 and config.top_k == 5  # nosec B101


def test_explicit_system_prompt_wins_and_attachments_join_active_turn():
    store = InMemoryAttachmentStore()
    store.put("img", "image/png", b"\x89PNG")
    chat = FakeChat(chunks=[])
    adapter, client, _ = _adapter(chat, attachments=store)
    request = ChatRequest.fresh(
        "gemini-2.5-flash",
        [Message("system", "ignored"), Message("user", "describe")],
        system_prompt="override",
        attachment_ids=["img"],
    )
    assert list(adapter.stream(request)) == [CompleteEvent()]  # nosec B101
    assert client.created[0]["history"][0].parts[0].text == "System: override"  # nosec B101
    text_part, image_part = chat.sent[0]
    assert text_part.text == "describe"  # nosec B101
    assert image_part.inline_data.mime_type == "image/png"  # nosec B101
    assert image_part.inline_data.data == b"\x89PNG"  # nosec B101


def test_sdk_error_is_classified():
    error = genai_errors.ClientError(
        429, {"error": {"code": 429, "message": "Resource has been exhausted", "status": "RESOURCE_EXHAUSTED"}}
    )
    adapter, _, _ = _adapter(FakeChat(error=error))
    events = list(adapter.stream(ChatRequest.fresh("gemini-2.5-flash", [Message("user", "Hi")])))

    assert len(events) == 1 and isinstance(events[0], ErrorEvent)  # nosec B101
    err = events[0].error
    assert err.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert err.provider == "Gemini"  # nosec B101
    assert err.message == "Resource has been exhausted"  # nosec B101


def test_only_system_messages_is_invalid():
    adapter, client, _ = _adapter(FakeChat())
    events = list(adapter.stream(ChatRequest.fresh("gemini-2.5-flash", [Message("system", "rules")])))
    assert events[0].error.code is ErrorCode.INVALID_REQUEST  # nosec B101
    assert client.created == []  # nosec B101


def test_continuation_is_rejected():
    adapter, _, _ = _adapter(FakeChat())
    request = ChatRequest.resume("gemini-2.5-flash", "r", [ApprovalDecision("a", True)])
    assert list(adapter.stream(request))[0].error.code is ErrorCode.INVALID_REQUEST  # nosec B101


def test_complete_returns_text():
    chat = FakeChat(response=SimpleNamespace(text="Hello", response_id="r-1"))
    adapter, _, _ = _adapter(chat)
    response = adapter.complete(ChatRequest.fresh("gemini-2.5-flash", [Message("user", "Hi")]))
    assert response.content == "Hello" and response.response_id == "r-1"  # nosec B101
    assert response.provider == "Gemini"  # nosec B101


def test_complete_raises_classified_error():
    error = genai_errors.ServerError(503, {"error": {"code": 503, "message": "The model is overloaded."}})
    adapter, _, _ = _adapter(FakeChat(error=error))
    with pytest.raises(ProviderError) as ei:
        adapter.complete(ChatRequest.fresh("gemini-2.5-flash", [Message("user", "Hi")]))
    assert ei.value.code is ErrorCode.SERVER_ERROR and ei.value.is_retryable  # nosec B101
