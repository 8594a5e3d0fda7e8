"""Block-streaming protocol adapter (Anthropic messages).

Responses stream as content blocks: each block opens with
``content_block_start``, receives ``content_block_delta`` frames and closes
with ``content_block_stop``. Text, thinking, remote tool use and remote tool
results are all blocks. Usage arrives split across ``message_start`` (input)
and ``message_delta`` (output) and is reported once at ``message_stop``.

Consecutive text blocks are separated with a blank line so the assistant
message reads naturally once the deltas are concatenated.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..base.constants import (
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_MCP_BETA,
    ANTHROPIC_VERSION,
    API_ANTHROPIC,
)
from ..base.errors import ProviderError, parse_block_stream_error
from ..base.models import ChatRequest, ChatResponse, ImagePart, Message, ToolServer
from ..base.streaming import (
    CompleteEvent,
    ErrorEvent,
    ReasoningComplete,
    ReasoningDelta,
    StreamEvent,
    TextDelta,
    ToolCallStatus,
    UsageEvent,
)
from ..config.defaults import ANTHROPIC_DEFAULT_BASE_URL
from .base import BaseProtocolAdapter, FrameDecoder
from .tool_tracking import ToolCallTracker, tool_event

BLOCK_SEPARATOR = "\n\n"


def mcp_server(server: ToolServer) -> Dict[str, Any]:
    """Render one tool server in the ``mcp_servers`` shape."""
    entry: Dict[str, Any] = {"type": "url", "url": server.url, "name": server.label}
    if server.allowed_tools:
        entry["tool_configuration"] = {"enabled": True, "allowed_tools": list(server.allowed_tools)}
    token = server.raw_token()
    if not token and server.custom_headers and server.custom_headers.get("Authorization"):
        token = server.custom_headers["Authorization"].replace("Bearer ", "", 1).strip()
    if token:
        entry["authorization_token"] = token
    return entry


def _wire_part(part: Any) -> Dict[str, Any]:
    if isinstance(part, ImagePart):
        media_type, payload = part.media_type_and_payload()
        return {"type": "image", "source": {"type": "base64", "media_type": media_type, "data": payload}}
    return {"type": "text", "text": part.text}


def _wire_message(msg: Message) -> Dict[str, Any]:
    if isinstance(msg.content, str):
        return {"role": msg.role, "content": msg.content}
    return {"role": msg.role, "content": [_wire_part(p) for p in msg.content]}


class MessagesStreamDecoder(FrameDecoder):
    def __init__(self, logger: logging.Logger, *, provider: str, model: Optional[str] = None) -> None:
        super().__init__(logger)
        self.provider = provider
        self.model = model
        self.message_id: Optional[str] = None
        self.tracker = ToolCallTracker()
        self._input_tokens: Optional[int] = None
        self._output_tokens: Optional[int] = None
        self._block_types: Dict[int, str] = {}
        self._thinking: Dict[int, str] = {}
        self._first_text_in_block = False
        self._text_emitted = False

    def on_frame(self, frame: Dict[str, Any]) -> Iterable[StreamEvent]:
        kind = frame.get("type")
        if kind == "message_start":
            message = frame.get("message") or {}
            self.message_id = message.get("id") or self.message_id
            usage = message.get("usage") or {}
            if usage.get("input_tokens") is not None:
                self._input_tokens = usage["input_tokens"]
            return ()
        if kind == "content_block_start":
            return self._block_start(frame)
        if kind == "content_block_delta":
            return self._block_delta(frame)
        if kind == "content_block_stop":
            index = frame.get("index", 0)
            if self._block_types.get(index) == "thinking":
                return (ReasoningComplete(self._thinking.get(index, "")),)
            return ()
        if kind == "message_delta":
            usage = frame.get("usage") or {}
            if usage.get("output_tokens") is not None:
                self._output_tokens = usage["output_tokens"]
            return ()
        if kind == "message_stop":
            events: List[StreamEvent] = []
            if self._input_tokens is not None or self._output_tokens is not None:
                events.append(UsageEvent.build(self._input_tokens, self._output_tokens))
            events.append(CompleteEvent(self.message_id))
            return events
        if kind == "error":
            return (ErrorEvent(parse_block_stream_error(frame, self.provider, self.model)),)
        return ()

    def _block_start(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        index = frame.get("index", 0)
        block = frame.get("content_block") or {}
        block_type = block.get("type") or ""
        self._block_types[index] = block_type
        self._first_text_in_block = block_type == "text"
        if block_type == "thinking":
            self._thinking[index] = block.get("thinking") or ""
            return ()
        if block_type == "mcp_tool_use" and block.get("id"):
            call = self.tracker.update(
                block["id"],
                name=block.get("name"),
                arguments=json.dumps(block.get("input") or {}),
                server_label=block.get("server_name"),
                status=ToolCallStatus.EXECUTING,
            )
            return (tool_event(call),) if call is not None else ()
        if block_type == "mcp_tool_result":
            tool_use_id = block.get("tool_use_id")
            if not tool_use_id or tool_use_id not in self.tracker:
                return ()
            result = json.dumps(block.get("content"))
            failed = bool(block.get("is_error"))
            call = self.tracker.update(
                tool_use_id,
                status=ToolCallStatus.FAILED if failed else ToolCallStatus.COMPLETED,
                result=None if failed else result,
                error=result if failed else None,
            )
            return (tool_event(call),) if call is not None else ()
        return ()

    def _block_delta(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        index = frame.get("index", 0)
        delta = frame.get("delta") or {}
        if delta.get("type") == "thinking_delta" or "thinking" in delta:
            text = delta.get("thinking") or ""
            if not text:
                return ()
            self._thinking[index] = self._thinking.get(index, "") + text
            return (ReasoningDelta(text),)
        text = delta.get("text") or ""
        if not text:
            return ()
        events: List[StreamEvent] = []
        if self._first_text_in_block and self._text_emitted:
            events.append(TextDelta(BLOCK_SEPARATOR))
        self._first_text_in_block = False
        self._text_emitted = True
        events.append(TextDelta(text))
        return events


class MessagesAdapter(BaseProtocolAdapter):
    api_type = API_ANTHROPIC
    provider_name = "Anthropic"
    default_base_url = ANTHROPIC_DEFAULT_BASE_URL
    PARAM_FIELDS = {
        "temperature": "temperature",
        "max_tokens": "max_tokens",
        "top_p": "top_p",
    }

    def auth_headers(self, request: ChatRequest) -> Dict[str, str]:
        headers = {"x-api-key": request.api_key, "anthropic-version": ANTHROPIC_VERSION}
        if self.active_tool_servers():
            headers["anthropic-beta"] = ANTHROPIC_MCP_BETA
        return headers

    def endpoint(self, request: ChatRequest) -> str:
        return f"{self.base_url(request)}/messages"

    def build_body(self, request: ChatRequest, *, streaming: bool) -> Dict[str, Any]:
        history = [m for m in self.messages_with_attachments(request) if m.role != "system"]
        body: Dict[str, Any] = {
            "model": request.model,
            "messages": [_wire_message(m) for m in history],
            "stream": streaming,
            "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
        }
        system = self.system_text(request)
        if system:
            body["system"] = system
        servers = [mcp_server(s) for s in self.active_tool_servers()]
        if servers:
            body["mcp_servers"] = servers
        return self.apply_params(request, body)

    def new_decoder(self, request: ChatRequest) -> FrameDecoder:
        return MessagesStreamDecoder(self._logger, provider=self.provider_for(request), model=request.model)

    def parse_completion(self, request: ChatRequest, data: Mapping[str, Any]) -> ChatResponse:
        text = "".join(
            block.get("text") or ""
            for block in data.get("content") or []
            if isinstance(block, dict) and block.get("type") == "text"
        )
        return ChatResponse(
            content=text,
            model=data.get("model") or request.model,
            provider=self.provider_for(request),
            response_id=data.get("id"),
        )

    def format_error(self, exc: BaseException, request: ChatRequest) -> ProviderError:
        return parse_block_stream_error(exc, self.provider_for(request), request.model)


__all__ = ["MessagesAdapter", "MessagesStreamDecoder", "mcp_server"]
