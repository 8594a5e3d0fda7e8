"""Event-typed protocol adapter (OpenAI Responses API).

The only adapter that supports remote tools with approvals and server-side
continuation. A fresh turn posts the history as ``input``; an approval
continuation posts ``previous_response_id`` plus one
``mcp_approval_response`` item per decision and lets the provider replay the
conversation from its own stored state. Both stream through the same
:class:`ResponsesStreamDecoder`.

Streaming requests are stored (``store: true``) because a pending approval
can only be resumed against a stored response. Buffered completions are not.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.constants import API_RESPONSES
from ..base.errors import ProviderError, parse_event_typed_error
from ..base.models import ChatRequest, ChatResponse, ImagePart, Message, ToolServer
from ..config.defaults import OPENAI_DEFAULT_BASE_URL
from .base import BaseProtocolAdapter, FrameDecoder
from .responses_decoder import ResponsesStreamDecoder


def mcp_tool(server: ToolServer) -> Dict[str, Any]:
    """Render one tool server in the Responses ``tools`` shape."""
    tool: Dict[str, Any] = {
        "type": "mcp",
        "server_label": server.label,
        "server_url": server.url,
        "require_approval": server.require_approval,
    }
    if server.allowed_tools:
        tool["allowed_tools"] = list(server.allowed_tools)
    if server.custom_headers:
        tool["headers"] = dict(server.custom_headers)
    token = server.bearer_token()
    if token:
        tool["authorization"] = token
    return tool


def supports_reasoning(model: str) -> bool:
    return model.startswith("o") or "gpt-5" in model


def _input_part(part: Any, role: str) -> Optional[Dict[str, Any]]:
    if isinstance(part, ImagePart):
        return {"type": "input_image", "image_url": part.data_uri()} if role == "user" else None
    if role == "assistant":
        return {"type": "output_text", "text": part.text}
    return {"type": "input_text", "text": part.text}


def _input_message(msg: Message) -> Dict[str, Any]:
    if isinstance(msg.content, str):
        return {"role": msg.role, "content": msg.content}
    parts = [_input_part(p, msg.role) for p in msg.content]
    return {"role": msg.role, "content": [p for p in parts if p is not None]}


def _output_text(data: Mapping[str, Any]) -> str:
    if isinstance(data.get("output_text"), str) and data["output_text"]:
        return data["output_text"]
    chunks: List[str] = []
    for item in data.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if isinstance(content, dict) and content.get("type") == "output_text" and content.get("text"):
                chunks.append(content["text"])
    return "".join(chunks)


class ResponsesAdapter(BaseProtocolAdapter):
    api_type = API_RESPONSES
    provider_name = "OpenAI"
    default_base_url = OPENAI_DEFAULT_BASE_URL
    supports_continuation = True
    PARAM_FIELDS = {
        "temperature": "temperature",
        "max_tokens": "max_output_tokens",
        "top_p": "top_p",
    }

    def auth_headers(self, request: ChatRequest) -> Dict[str, str]:
        return {"Authorization": f"Bearer {request.api_key}"}

    def endpoint(self, request: ChatRequest) -> str:
        return f"{self.base_url(request)}/responses"

    def tools(self) -> List[Dict[str, Any]]:
        return [mcp_tool(s) for s in self.active_tool_servers()]

    def wire_input(self, request: ChatRequest) -> Any:
        """String input for a lone plain user message, else a list of role items."""
        history = [m for m in request.messages if m.role != "system"]
        images = self.attachment_images(request)
        if images:
            for idx in range(len(history) - 1, -1, -1):
                if history[idx].role == "user":
                    history[idx] = history[idx].with_images(images)
                    break
        if len(history) == 1 and history[0].role == "user" and isinstance(history[0].content, str):
            return history[0].content
        return [_input_message(m) for m in history]

    def build_body(self, request: ChatRequest, *, streaming: bool) -> Dict[str, Any]:
        continuation = request.continuation
        body: Dict[str, Any] = {"model": request.model}
        if continuation is not None:
            body["previous_response_id"] = continuation.previous_response_id
            body["input"] = [
                {
                    "type": "mcp_approval_response",
                    "approve": d.approve,
                    "approval_request_id": d.approval_request_id,
                }
                for d in continuation.decisions
            ]
        else:
            body["input"] = self.wire_input(request)
        body["stream"] = streaming
        body["store"] = streaming
        instructions = self.system_text(request)
        if instructions:
            body["instructions"] = instructions
        tools = self.tools()
        if tools:
            body["tools"] = tools
        effort = request.params.reasoning_effort
        if effort and supports_reasoning(request.model):
            body["reasoning"] = {"effort": effort, "summary": "auto"}
        if continuation is not None:
            body.update(request.custom_body_params or {})
            return body
        return self.apply_params(request, body)

    def new_decoder(self, request: ChatRequest) -> FrameDecoder:
        return ResponsesStreamDecoder(self._logger, provider=self.provider_for(request), model=request.model)

    def parse_completion(self, request: ChatRequest, data: Mapping[str, Any]) -> ChatResponse:
        return ChatResponse(
            content=_output_text(data),
            model=data.get("model") or request.model,
            provider=self.provider_for(request),
            response_id=data.get("id"),
        )

    def format_error(self, exc: BaseException, request: ChatRequest) -> ProviderError:
        return parse_event_typed_error(exc, self.provider_for(request), request.model)


__all__ = ["ResponsesAdapter", "mcp_tool", "supports_reasoning"]
