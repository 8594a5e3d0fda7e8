"""Token-delta protocol adapter (OpenAI-compatible chat completions).

Serves every backend that speaks ``POST {base}/chat/completions`` with
Bearer auth: OpenAI itself plus xAI, DeepSeek, Moonshot, Groq and
OpenRouter. The provider shown in errors is derived from the base URL.

Streaming frames look like::

    data: {"choices":[{"delta":{"content":"Hel"}}]}
    data: {"choices":[{"delta":{},"finish_reason":"stop"}]}
    data: {"choices":[],"usage":{"prompt_tokens":9,"completion_tokens":2}}
    data: [DONE]

Usage frames arrive after the finish reason, so completion is deferred until
``[DONE]`` or end of stream. The finish reason already settles the answer: a
transport failure after it still ends the stream with ``CompleteEvent``.

``stream_options.include_usage`` is only sent to the built-in hosts; custom
endpoints can opt in through ``custom_body_params``.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from ..base.constants import API_CHAT_COMPLETIONS
from ..base.errors import ProviderError, parse_token_delta_error
from ..base.models import ChatRequest, ChatResponse, ImagePart, Message
from ..base.streaming import CompleteEvent, StreamEvent, TextDelta, UsageEvent
from ..config.defaults import OPENAI_DEFAULT_BASE_URL
from .base import BaseProtocolAdapter, FrameDecoder

# Host fragment -> display name; first match wins.
_HOST_PROVIDERS = (
    ("x.ai", "xAI"),
    ("deepseek", "DeepSeek"),
    ("openrouter", "OpenRouter"),
    ("groq", "Groq"),
    ("moonshot", "Moonshot"),
)
_OPENAI_HOST = "api.openai.com"


def reports_stream_usage(base_url: str) -> bool:
    """Whether ``base_url`` is a built-in host known to accept ``stream_options``."""
    lowered = (base_url or "").lower()
    return _OPENAI_HOST in lowered or any(fragment in lowered for fragment, _ in _HOST_PROVIDERS)


def provider_from_base_url(base_url: str) -> str:
    """Return the display name of the OpenAI-compatible host at ``base_url``."""
    lowered = (base_url or "").lower()
    for fragment, name in _HOST_PROVIDERS:
        if fragment in lowered:
            return name
    return "OpenAI"


def _wire_part(part: Any) -> Dict[str, Any]:
    if isinstance(part, ImagePart):
        return {"type": "image_url", "image_url": {"url": part.data_uri()}}
    return {"type": "text", "text": part.text}


def _wire_message(msg: Message) -> Dict[str, Any]:
    if isinstance(msg.content, str):
        return {"role": msg.role, "content": msg.content}
    return {"role": msg.role, "content": [_wire_part(p) for p in msg.content]}


def _usage_event(usage: Mapping[str, Any]) -> UsageEvent:
    return UsageEvent.build(
        usage.get("prompt_tokens"),
        usage.get("completion_tokens"),
        usage.get("total_tokens"),
    )


class ChatCompletionsDecoder(FrameDecoder):
    accepts_done_sentinel = True

    def __init__(self, logger) -> None:
        super().__init__(logger)
        self._finished = False
        self._completed = False

    def on_frame(self, frame: Dict[str, Any]) -> Iterable[StreamEvent]:
        events: List[StreamEvent] = []
        choices = frame.get("choices") or []
        choice = choices[0] if choices and isinstance(choices[0], dict) else {}
        content = (choice.get("delta") or {}).get("content")
        if isinstance(content, str) and content:
            events.append(TextDelta(content))
        usage = frame.get("usage")
        if isinstance(usage, dict):
            events.append(_usage_event(usage))
        if choice.get("finish_reason"):
            self._finished = True
        return events

    @property
    def settled(self) -> bool:
        return self._finished

    def on_done(self) -> Iterable[StreamEvent]:
        return self._complete()

    def finish(self) -> Iterable[StreamEvent]:
        # EOF without [DONE] still completes; the base loop adds one otherwise
        return self._complete() if self._finished else ()

    def _complete(self) -> Iterable[StreamEvent]:
        if self._completed:
            return ()
        self._completed = True
        return (CompleteEvent(),)


class ChatCompletionsAdapter(BaseProtocolAdapter):
    api_type = API_CHAT_COMPLETIONS
    provider_name = "OpenAI"
    default_base_url = OPENAI_DEFAULT_BASE_URL

    def provider_for(self, request: ChatRequest) -> str:
        return provider_from_base_url(self.base_url(request))

    def auth_headers(self, request: ChatRequest) -> Dict[str, str]:
        return {"Authorization": f"Bearer {request.api_key}"}

    def endpoint(self, request: ChatRequest) -> str:
        return f"{self.base_url(request)}/chat/completions"

    def wire_messages(self, request: ChatRequest) -> List[Dict[str, Any]]:
        """System prompt first, then the history with attachments on the last message."""
        history = self.messages_with_attachments(request)
        out: List[Dict[str, Any]] = []
        if request.system_prompt:
            out.append({"role": "system", "content": request.system_prompt})
            history = [m for m in history if m.role != "system"]
        out.extend(_wire_message(m) for m in history)
        return out

    def build_body(self, request: ChatRequest, *, streaming: bool) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "model": request.model,
            "messages": self.wire_messages(request),
            "stream": streaming,
        }
        self.apply_params(request, body)
        if streaming and reports_stream_usage(self.base_url(request)):
            body.setdefault("stream_options", {"include_usage": True})
        return body

    def new_decoder(self, request: ChatRequest) -> FrameDecoder:
        return ChatCompletionsDecoder(self._logger)

    def parse_completion(self, request: ChatRequest, data: Mapping[str, Any]) -> ChatResponse:
        choices = data.get("choices") or []
        message = choices[0].get("message", {}) if choices and isinstance(choices[0], dict) else {}
        content = message.get("content") if isinstance(message, dict) else None
        return ChatResponse(
            content=content if isinstance(content, str) else "",
            model=data.get("model") or request.model,
            provider=self.provider_for(request),
            response_id=data.get("id"),
        )

    def format_error(self, exc: BaseException, request: ChatRequest) -> ProviderError:
        return parse_token_delta_error(exc, self.provider_for(request), request.model)


__all__ = [
    "ChatCompletionsAdapter",
    "ChatCompletionsDecoder",
    "provider_from_base_url",
    "reports_stream_usage",
]
