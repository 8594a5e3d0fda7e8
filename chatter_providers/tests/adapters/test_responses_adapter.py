from __future__ import annotations

from chatter_providers.adapters import ResponsesAdapter
from chatter_providers.adapters.responses import mcp_tool, supports_reasoning
from chatter_providers.base.models import (
    ApprovalDecision,
    ChatRequest,
    GenerationParams,
    Message,
    TextPart,
    ToolServer,
)
from chatter_providers.base.streaming import ApprovalRequestEvent, CompleteEvent, TextDelta
from chatter_providers.registries import InMemoryAttachmentStore, InMemoryToolServerRegistry
from chatter_providers.tests.helpers import Recorder, sse

DOCS = ToolServer(label="docs", url="https://mcp.docs.local/sse", require_approval="always", auth_token="tok")


def _registry() -> InMemoryToolServerRegistry:
    registry = InMemoryToolServerRegistry([DOCS, ToolServer(label="blank", url="")])
    registry.add(ToolServer(label="off", url="https://off.local"), enabled=False)
    return registry


def test_mcp_tool_shape():
    server = ToolServer(
        label="fs",
        url="https://fs.local",
        allowed_tools=["read"],
        custom_headers={"X-Org": "o"},
        auth_token="Bearer abc",
    )
    assert mcp_tool(server) == {  # nosec B101 - assert is appropriate in unit tests
        "type": "mcp",
        "server_label": "fs",
        "server_url": "https://fs.local",
        "require_approval": "never",
        "allowed_tools": ["read"],
        "headers": {"X-Org": "o"},
        "authorization": "Bearer abc",
    }


def test_supports_reasoning():
    assert supports_reasoning("o3-mini") and supports_reasoning("gpt-5-mini")  # nosec B101
    assert not supports_reasoning("gpt-4o")  # nosec B101


def test_fresh_turn_body():
    adapter = ResponsesAdapter(tool_servers=_registry())
    request = ChatRequest.fresh(
        "gpt-5",
        [Message("system", "be kind"), Message("user", "Hi")],
        params=GenerationParams(temperature=0.5, max_tokens=100, reasoning_effort="low", presence_penalty=1.0),
    )
    body = adapter.build_body(request, streaming=True)

    assert body["input"] == "Hi"  # nosec B101
    assert body["instructions"] == "be kind"  # nosec B101
    assert body["stream"] is True and body["store"] is True  # nosec B101
    assert body["tools"] == [mcp_tool(DOCS)]  # nosec B101
    assert body["tools"][0]["authorization"] == "Bearer tok"  # nosec B101
    assert body["reasoning"] == {"effort": "low", "summary": "auto"}  # nosec B101
    assert body["max_output_tokens"] == 100 and body["temperature"] == 0.5  # nosec B101
    assert "presence_penalty" not in body  # nosec B101


def test_buffered_body_is_not_stored_and_skips_reasoning_for_other_models():
    request = ChatRequest.fresh("gpt-4o", [Message("user", "Hi")], params=GenerationParams(reasoning_effort="high"))
    body = ResponsesAdapter().build_body(request, streaming=False)
    assert body["stream"] is False and body["store"] is False  # nosec B101
    assert "reasoning" not in body and "tools" not in body  # nosec B101


def test_history_becomes_role_items_with_attachment_on_last_user_message():
    store = InMemoryAttachmentStore()
    store.put("img", "image/png", b"png")
    adapter = ResponsesAdapter(attachments=store)
    request = ChatRequest.fresh(
        "gpt-4o",
        [
            Message("user", "first"),
            Message("assistant", [TextPart("answer")]),
            Message("user", "look at this"),
        ],
        attachment_ids=["img"],
    )
    items = adapter.wire_input(request)
    assert items[0] == {"role": "user", "content": "first"}  # nosec B101
    assert items[1] == {"role": "assistant", "content": [{"type": "output_text", "text": "answer"}]}  # nosec B101
    assert items[2]["content"] == [  # nosec B101
        {"type": "input_text", "text": "look at this"},
        {"type": "input_image", "image_url": "data:image/png;base64,cG5n"},
    ]


def test_continuation_body():
    adapter = ResponsesAdapter(tool_servers=_registry())
    request = ChatRequest.resume(
        "gpt-5",
        "resp_1",
        [ApprovalDecision("apr_1", True), ApprovalDecision("apr_2", False)],
        params=GenerationParams(temperature=0.1),
        custom_body_params={"metadata": {"k": "v"}},
    )
    body = adapter.build_body(request, streaming=True)

    assert body["previous_response_id"] == "resp_1"  # nosec B101
    assert body["input"] == [  # nosec B101
        {"type": "mcp_approval_response", "approve": True, "approval_request_id": "apr_1"},
        {"type": "mcp_approval_response", "approve": False, "approval_request_id": "apr_2"},
    ]
    assert body["tools"] == [mcp_tool(DOCS)]  # nosec B101
    assert body["metadata"] == {"k": "v"}  # nosec B101
    assert "temperature" not in body and "instructions" not in body  # nosec B101


def test_approval_then_continuation_round_trip():
    recorder = Recorder()
    recorder.queue_stream(
        [
            sse(
                {"type": "response.created", "response": {"id": "resp_1"}},
                {
                    "type": "response.output_item.done",
                    "item": {
                        "type": "mcp_approval_request",
                        "id": "apr_1",
                        "name": "delete",
                        "arguments": "{}",
                        "server_label": "docs",
                    },
                },
                {"type": "response.completed", "response": {"id": "resp_1"}},
            )
        ]
    )
    recorder.queue_stream(
        [
            sse(
                {"type": "response.created", "response": {"id": "resp_2"}},
                {"type": "response.output_text.delta", "item_id": "m", "delta": "Deleted."},
                {"type": "response.completed", "response": {"id": "resp_2"}},
            )
        ]
    )
    adapter = ResponsesAdapter(http_client=recorder.client(), tool_servers=_registry())

    first = list(adapter.stream(ChatRequest.fresh("gpt-5", [Message("user", "clean up")], api_key="sk-live")))
    approval = next(e for e in first if isinstance(e, ApprovalRequestEvent))
    assert approval.response_id == "resp_1"  # nosec B101
    assert first[-1] == CompleteEvent("resp_1")  # nosec B101

    resumed = ChatRequest.resume("gpt-5", approval.response_id, [ApprovalDecision(approval.id, True)], api_key="sk-live")
    second = list(adapter.stream(resumed))
    assert second == [TextDelta("Deleted."), CompleteEvent("resp_2")]  # nosec B101

    body = recorder.body(1)
    assert str(recorder.requests[1].url) == "https://api.openai.com/v1/responses"  # nosec B101
    assert body["previous_response_id"] == "resp_1"  # nosec B101
    assert "messages" not in body and body["tools"][0]["server_label"] == "docs"  # nosec B101


def test_complete_reads_output_items():
    recorder = Recorder().queue_json(
        {
            "id": "resp_3",
            "output": [
                {"type": "reasoning", "summary": []},
                {"type": "message", "content": [{"type": "output_text", "text": "Hel"}, {"type": "output_text", "text": "lo"}]},
            ],
        }
    )
    response = ResponsesAdapter(http_client=recorder.client()).complete(
        ChatRequest.fresh("gpt-4o", [Message("user", "Hi")], api_key="k")
    )
    assert response.content == "Hello" and response.response_id == "resp_3"  # nosec B101
    assert response.provider == "OpenAI"  # nosec B101
