from __future__ import annotations

import json
import logging

from chatter_providers.adapters import MessagesAdapter
from chatter_providers.adapters.messages import MessagesStreamDecoder, mcp_server
from chatter_providers.base.errors import ErrorCode
from chatter_providers.base.models import ChatRequest, GenerationParams, Message, ToolServer
from chatter_providers.base.streaming import (
    CompleteEvent,
    ErrorEvent,
    ReasoningComplete,
    ReasoningDelta,
    TextDelta,
    ToolCallEvent,
    ToolCallStatus,
    ToolResultEvent,
    UsageEvent,
    accumulate_text,
)
from chatter_providers.registries import InMemoryAttachmentStore, InMemoryToolServerRegistry
from chatter_providers.tests.helpers import Recorder, sse


def _decoder() -> MessagesStreamDecoder:
    return MessagesStreamDecoder(logging.getLogger("chatter.tests.messages"), provider="Anthropic", model="claude")


def _feed(decoder, *frames):
    out = []
    for frame in frames:
        out.extend(decoder.handle(json.dumps(frame)))
    return out


def _text_block(index, *chunks):
    frames = [{"type": "content_block_start", "index": index, "content_block": {"type": "text", "text": ""}}]
    frames += [{"type": "content_block_delta", "index": index, "delta": {"type": "text_delta", "text": c}} for c in chunks]
    frames.append({"type": "content_block_stop", "index": index})
    return frames


def test_text_blocks_are_separated_and_usage_reported_at_stop():
    frames = [
        {"type": "message_start", "message": {"id": "msg_1", "usage": {"input_tokens": 12}}},
        *_text_block(0, "Hello", " there"),
        *_text_block(1, "Second"),
        {"type": "message_delta", "delta": {"stop_reason": "end_turn"}, "usage": {"output_tokens": 4}},
        {"type": "message_stop"},
    ]
    events = _feed(_decoder(), *frames)
    assert accumulate_text(events) == "Hello there\n\nSecond"  # nosec B101 - assert is appropriate in unit tests
    assert events[-2:] == [UsageEvent(12, 4, 16), CompleteEvent("msg_1")]  # nosec B101


def test_no_separator_before_first_text_block():
    frames = [
        {"type": "content_block_start", "index": 0, "content_block": {"type": "thinking", "thinking": ""}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "thinking_delta", "thinking": "Let me"}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "thinking_delta", "thinking": " think"}},
        {"type": "content_block_stop", "index": 0},
        *_text_block(1, "Answer"),
    ]
    events = _feed(_decoder(), *frames)
    assert events == [  # nosec B101
        ReasoningDelta("Let me"),
        ReasoningDelta(" think"),
        ReasoningComplete("Let me think"),
        TextDelta("Answer"),
    ]


def test_remote_tool_blocks():
    frames = [
        {
            "type": "content_block_start",
            "index": 0,
            "content_block": {"type": "mcp_tool_use", "id": "tu_1", "name": "search", "server_name": "docs", "input": {"q": "x"}},
        },
        {
            "type": "content_block_start",
            "index": 1,
            "content_block": {"type": "mcp_tool_result", "tool_use_id": "tu_1", "is_error": False, "content": [{"type": "text", "text": "ok"}]},
        },
        {
            "type": "content_block_start",
            "index": 2,
            "content_block": {"type": "mcp_tool_result", "tool_use_id": "unknown", "content": []},
        },
    ]
    events = _feed(_decoder(), *frames)
    assert [type(e) for e in events] == [ToolCallEvent, ToolResultEvent]  # nosec B101
    started, finished = events[0].call, events[1].call
    assert started.status is ToolCallStatus.EXECUTING  # nosec B101
    assert json.loads(started.arguments) == {"q": "x"}  # nosec B101
    assert started.server_label == "docs"  # nosec B101
    assert finished.status is ToolCallStatus.COMPLETED  # nosec B101
    assert json.loads(finished.result) == [{"type": "text", "text": "ok"}]  # nosec B101


def test_failed_tool_result():
    events = _feed(
        _decoder(),
        {"type": "content_block_start", "index": 0, "content_block": {"type": "mcp_tool_use", "id": "tu_2", "name": "x"}},
        {
            "type": "content_block_start",
            "index": 1,
            "content_block": {"type": "mcp_tool_result", "tool_use_id": "tu_2", "is_error": True, "content": "nope"},
        },
    )
    failed = events[-1].call
    assert failed.status is ToolCallStatus.FAILED and failed.error == '"nope"'  # nosec B101


def test_in_band_error_frame():
    events = _feed(_decoder(), {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}})
    assert isinstance(events[0], ErrorEvent)  # nosec B101
    assert events[0].error.code is ErrorCode.SERVER_ERROR and events[0].error.is_retryable  # nosec B101


def test_mcp_server_shape_and_header_token_fallback():
    assert mcp_server(ToolServer(label="docs", url="https://d.local", allowed_tools=["a"], auth_token="Bearer t")) == {  # nosec B101
        "type": "url",
        "url": "https://d.local",
        "name": "docs",
        "tool_configuration": {"enabled": True, "allowed_tools": ["a"]},
        "authorization_token": "t",
    }
    fallback = mcp_server(ToolServer(label="h", url="https://h.local", custom_headers={"Authorization": "Bearer hdr"}))
    assert fallback["authorization_token"] == "hdr"  # nosec B101


def test_stream_request_shape():
    store = InMemoryAttachmentStore()
    store.put("img", "image/webp", b"webp")
    registry = InMemoryToolServerRegistry([ToolServer(label="docs", url="https://d.local")])
    recorder = Recorder().queue_stream(
        [sse({"type": "message_start", "message": {"id": "msg_2"}}, *_text_block(0, "Hi"), {"type": "message_stop"})]
    )
    adapter = MessagesAdapter(http_client=recorder.client(), attachments=store, tool_servers=registry)
    request = ChatRequest.fresh(
        "claude-sonnet-4-20250514",
        [Message("system", "rules"), Message("user", "see image")],
        api_key="ak-live",
        attachment_ids=["img"],
        params=GenerationParams(max_tokens=1000, frequency_penalty=0.5),
    )
    events = list(adapter.stream(request))
    assert events == [TextDelta("Hi"), CompleteEvent("msg_2")]  # nosec B101

    sent = recorder.requests[0]
    assert str(sent.url) == "https://api.anthropic.com/v1/messages"  # nosec B101
    assert sent.headers["x-api-key"] == "ak-live"  # nosec B101
    assert sent.headers["anthropic-version"] == "2023-06-01"  # nosec B101
    assert sent.headers["anthropic-beta"] == "mcp-client-2025-04-04"  # nosec B101
    body = recorder.body()
    assert body["system"] == "rules"  # nosec B101
    assert body["max_tokens"] == 1000  # nosec B101
    assert "frequency_penalty" not in body  # nosec B101
    assert body["mcp_servers"][0]["url"] == "https://d.local"  # nosec B101
    assert body["messages"] == [  # nosec B101
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "see image"},
                {"type": "image", "source": {"type": "base64", "media_type": "image/webp", "data": "d2VicA=="}},
            ],
        }
    ]


def test_default_max_tokens_and_no_beta_without_servers():
    adapter = MessagesAdapter()
    request = ChatRequest.fresh("claude-3-5-haiku-20241022", [Message("user", "Hi")], api_key="k")
    assert adapter.build_body(request, streaming=False)["max_tokens"] == 4096  # nosec B101
    assert "anthropic-beta" not in adapter.build_headers(request, streaming=False)  # nosec B101


def test_complete_joins_text_blocks():
    recorder = Recorder().queue_json(
        {"id": "msg_5", "content": [{"type": "text", "text": "A"}, {"type": "thinking", "thinking": "x"}, {"type": "text", "text": "B"}]}
    )
    response = MessagesAdapter(http_client=recorder.client()).complete(
        ChatRequest.fresh("claude-opus-4-20250514", [Message("user", "Hi")], api_key="k")
    )
    assert response.content == "AB" and response.response_id == "msg_5"  # nosec B101
