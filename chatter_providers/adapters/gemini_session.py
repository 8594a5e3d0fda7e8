"""Turn-based-session protocol adapter (Gemini through ``google-genai``).

The SDK models a conversation as a chat session: prior turns are passed as
history when the session opens and only the active turn is sent. Sessions
have no system role, so a system prompt is emulated with a leading
user/model exchange.

A client is built per invocation from the request's own key and endpoint, so
concurrent requests with different credentials never share SDK state. Tests
inject ``client_factory`` to replace the SDK client with a fake.
"""
from __future__ import annotations

import base64
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..base.constants import API_GEMINI, SESSION_SYSTEM_ACK, SESSION_SYSTEM_PREFIX
from ..base.errors import ErrorCode, ProviderError, build_provider_error, parse_session_error
from ..base.logging import LogContext, normalized_log_event
from ..base.models import ChatRequest, ChatResponse, ImagePart, Message
from ..base.streaming import CompleteEvent, StreamEvent, TextDelta, UsageEvent
from .base import BaseProtocolAdapter

ClientFactory = Callable[[ChatRequest], Any]

_CONFIG_FIELDS = {
    "temperature": "temperature",
    "top_p": "top_p",
    "max_tokens": "max_output_tokens",
    "frequency_penalty": "frequency_penalty",
    "presence_penalty": "presence_penalty",
}


def default_client_factory(request: ChatRequest) -> genai.Client:
    """Build an SDK client bound to the request's key, endpoint and headers."""
    http_options = None
    if request.base_url or request.custom_headers:
        http_options = types.HttpOptions(
            base_url=request.base_url or None,
            headers=dict(request.custom_headers) or None,
        )
    return genai.Client(api_key=request.api_key, http_options=http_options)


def _sdk_part(part: Any) -> types.Part:
    if isinstance(part, ImagePart):
        mime_type, payload = part.media_type_and_payload()
        return types.Part.from_bytes(data=base64.b64decode(payload), mime_type=mime_type)
    return types.Part.from_text(text=part.text)


def _session_role(msg: Message) -> str:
    return "model" if msg.role == "assistant" else "user"


def _usage_event(meta: Any) -> Optional[UsageEvent]:
    if meta is None:
        return None
    return UsageEvent.build(
        getattr(meta, "prompt_token_count", None),
        getattr(meta, "candidates_token_count", None),
        getattr(meta, "total_token_count", None),
    )


class GeminiSessionAdapter(BaseProtocolAdapter):
    api_type = API_GEMINI
    provider_name = "Gemini"
    EXPECTED_ERRORS = BaseProtocolAdapter.EXPECTED_ERRORS + (genai_errors.APIError,)

    def __init__(self, *, client_factory: Optional[ClientFactory] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._client_factory = client_factory or default_client_factory

    # ------------------------------------------------------------ shaping
    def split_turns(self, request: ChatRequest) -> Tuple[Optional[str], List[Message], Message]:
        """Return ``(system_text, history, active_turn)``.

        Leading system messages are folded into the system text unless the
        request carries an explicit system prompt.
        """
        messages = request.messages
        leading: List[str] = []
        while messages and messages[0].role == "system":
            leading.append(messages.pop(0).text_or_joined())
        if not messages:
            raise build_provider_error(
                ErrorCode.INVALID_REQUEST,
                "No message to send",
                self.provider_for(request),
                headers={},
                model=request.model,
            )
        system = request.system_prompt or "\n\n".join(t for t in leading if t) or None
        active = messages[-1].with_images(self.attachment_images(request))
        return system, messages[:-1], active

    def history(self, system: Optional[str], prior: List[Message]) -> List[types.Content]:
        contents: List[types.Content] = []
        if system:
            contents.append(
                types.Content(role="user", parts=[types.Part.from_text(text=f"{SESSION_SYSTEM_PREFIX}{system}")])
            )
            contents.append(types.Content(role="model", parts=[types.Part.from_text(text=SESSION_SYSTEM_ACK)]))
        for msg in prior:
            contents.append(types.Content(role=_session_role(msg), parts=[_sdk_part(p) for p in msg.parts()]))
        return contents

    def generation_config(self, request: ChatRequest) -> types.GenerateContentConfig:
        fields: Dict[str, Any] = dict(request.custom_body_params or {})
        for name, value in request.params.present().items():
            if name in _CONFIG_FIELDS:
                fields[_CONFIG_FIELDS[name]] = value
        return types.GenerateContentConfig(**fields)

    def open_session(self, request: ChatRequest) -> Tuple[Any, List[types.Part]]:
        """Create the SDK chat session and the parts of the active turn."""
        system, prior, active = self.split_turns(request)
        client = self._client_factory(request)
        chat = client.chats.create(
            model=request.model,
            history=self.history(system, prior),
            config=self.generation_config(request),
        )
        return chat, [_sdk_part(p) for p in active.parts()]

    # ---------------------------------------------------------- transport
    def events(self, request: ChatRequest) -> Iterator[StreamEvent]:
        token = request.cancellation
        if token is not None:
            token.raise_if_cancelled()
        chat, parts = self.open_session(request)
        chunks = chat.send_message_stream(parts)
        usage = None
        try:
            for chunk in chunks:
                if token is not None:
                    token.raise_if_cancelled()
                text = getattr(chunk, "text", None)
                if text:
                    yield TextDelta(text)
                meta = getattr(chunk, "usage_metadata", None)
                if meta is not None:
                    usage = meta
        finally:
            close = getattr(chunks, "close", None)
            if callable(close):
                close()
        event = _usage_event(usage)
        if event is not None:
            yield event
        yield CompleteEvent()

    def complete(self, request: ChatRequest) -> ChatResponse:
        rejected = self.unsupported_continuation(request)
        if rejected is not None:
            raise rejected
        ctx = LogContext(provider=self.provider_for(request), model=request.model, api_type=self.api_type)
        try:
            chat, parts = self.open_session(request)
            response = chat.send_message(parts)
        except ProviderError:
            raise
        except (genai_errors.APIError, httpx.HTTPError, ValueError) as exc:
            err = self.format_error(exc, request)
            normalized_log_event(
                self._logger,
                "complete.adapter.error",
                ctx,
                phase="complete",
                error_code=err.code.value,
                level=logging.WARNING,
            )
            raise err from exc
        text = getattr(response, "text", None) or ""
        normalized_log_event(self._logger, "complete.adapter.end", ctx, phase="complete", emitted=bool(text))
        return ChatResponse(
            content=text,
            model=request.model,
            provider=self.provider_for(request),
            response_id=getattr(response, "response_id", None),
        )

    def format_error(self, exc: BaseException, request: ChatRequest) -> ProviderError:
        return parse_session_error(exc, self.provider_for(request), request.model)


__all__ = ["GeminiSessionAdapter", "default_client_factory"]
