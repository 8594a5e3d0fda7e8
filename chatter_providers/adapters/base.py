"""Shared protocol adapter machinery.

Purpose:
    Hold everything the four protocol adapters have in common so each
    subclass only describes its wire shape:

    - header construction (content type, event-stream accept, auth, custom)
    - generation parameter folding through a per-adapter field mapping
    - attachment and tool-server lookups against the external collaborators
    - the streaming lifecycle: cancellation, terminal-event guarantee,
      transport error conversion and finalize logging
    - the SSE read loop feeding a per-invocation frame decoder

Lifecycle guarantees of :meth:`BaseProtocolAdapter.stream`:
    - Exactly one terminal event (``ErrorEvent`` or ``CompleteEvent``) ends the
      sequence; nothing is yielded after it.
    - Provider and transport failures become an ``ErrorEvent``; they are never
      raised to the caller.
    - Cancellation ends the sequence with ``CompleteEvent``. The token is
      polled before every read and every frame, and a cancel callback closes
      the live response so a blocked read returns immediately.
"""
from __future__ import annotations

import contextlib
import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Type

import httpx

from ..base.cancellation import CancelledError
from ..base.constants import EVENT_STREAM_MEDIA_TYPE, JSON_MEDIA_TYPE, SSE_DONE_SENTINEL
from ..base.errors import ErrorCode, ProviderError, build_provider_error
from ..base.http import get_httpx_client
from ..base.interfaces import IAttachmentStore, IToolServerRegistry
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatRequest, ChatResponse, ImagePart, Message, ToolServer
from ..base.streaming import (
    CompleteEvent,
    ErrorEvent,
    SSEDecoder,
    StreamEvent,
    StreamMetrics,
    finalize_stream,
)

DEFAULT_PARAM_FIELDS: Mapping[str, str] = {
    "temperature": "temperature",
    "max_tokens": "max_tokens",
    "top_p": "top_p",
    "frequency_penalty": "frequency_penalty",
    "presence_penalty": "presence_penalty",
}


class FrameDecoder:
    """Per-invocation decoder turning SSE payloads into stream events.

    Subclasses implement :meth:`on_frame`; decoders that understand the
    ``[DONE]`` sentinel override :meth:`on_done`. Payloads that are not JSON
    objects are ignored.
    """

    accepts_done_sentinel = False

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def handle(self, payload: str) -> Iterable[StreamEvent]:
        if payload.strip() == SSE_DONE_SENTINEL:
            return self.on_done() if self.accepts_done_sentinel else ()
        try:
            frame = json.loads(payload)
        except ValueError:
            self._logger.debug("skipping non-JSON stream frame: %.120s", payload)
            return ()
        if not isinstance(frame, dict):
            return ()
        return self.on_frame(frame)

    def on_frame(self, frame: Dict[str, Any]) -> Iterable[StreamEvent]:
        raise NotImplementedError

    def on_done(self) -> Iterable[StreamEvent]:
        return (CompleteEvent(),)

    def finish(self) -> Iterable[StreamEvent]:
        """Called at EOF; may flush buffered state (default: nothing)."""
        return ()

    @property
    def settled(self) -> bool:
        """True once the provider signalled the answer is complete.

        A transport failure after that point ends the stream through
        :meth:`finish` instead of surfacing an error.
        """
        return False


class BaseProtocolAdapter:
    """Base class for protocol adapters (see module docstring)."""

    api_type: str = ""
    provider_name: str = ""
    default_base_url: str = ""
    supports_continuation: bool = False
    PARAM_FIELDS: Mapping[str, str] = DEFAULT_PARAM_FIELDS
    # failures converted without an error-level traceback
    EXPECTED_ERRORS: Tuple[Type[BaseException], ...] = (httpx.HTTPError, ProviderError)

    def __init__(
        self,
        *,
        http_client: Optional[httpx.Client] = None,
        attachments: Optional[IAttachmentStore] = None,
        tool_servers: Optional[IToolServerRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._http_client = http_client
        self._attachments = attachments
        self._tool_servers = tool_servers
        self._logger = logger or get_logger(f"chatter.adapters.{self.api_type or 'base'}")

    # ------------------------------------------------------------------ hooks
    def auth_headers(self, request: ChatRequest) -> Dict[str, str]:
        raise NotImplementedError

    def endpoint(self, request: ChatRequest) -> str:
        raise NotImplementedError

    def build_body(self, request: ChatRequest, *, streaming: bool) -> Dict[str, Any]:
        raise NotImplementedError

    def new_decoder(self, request: ChatRequest) -> FrameDecoder:
        raise NotImplementedError

    def parse_completion(self, request: ChatRequest, data: Mapping[str, Any]) -> ChatResponse:
        raise NotImplementedError

    def format_error(self, exc: BaseException, request: ChatRequest) -> ProviderError:
        raise NotImplementedError

    def provider_for(self, request: ChatRequest) -> str:
        """Display name of the backend serving ``request``."""
        return self.provider_name

    # -------------------------------------------------------- shared helpers
    def base_url(self, request: ChatRequest) -> str:
        return (request.base_url or self.default_base_url).rstrip("/")

    def build_headers(self, request: ChatRequest, *, streaming: bool) -> Dict[str, str]:
        """Content type, optional event-stream accept, auth, then custom headers."""
        headers = {"Content-Type": JSON_MEDIA_TYPE}
        if streaming:
            headers["Accept"] = EVENT_STREAM_MEDIA_TYPE
        headers.update(self.auth_headers(request))
        headers.update(request.custom_headers or {})
        return headers

    def apply_params(self, request: ChatRequest, body: Dict[str, Any]) -> Dict[str, Any]:
        """Fold custom body params, then mapped generation parameters, into ``body``.

        Explicit generation parameters win over a same-named custom field.
        """
        body.update(request.custom_body_params or {})
        for name, value in request.params.present().items():
            wire_name = self.PARAM_FIELDS.get(name)
            if wire_name:
                body[wire_name] = value
        return body

    def attachment_images(self, request: ChatRequest) -> List[ImagePart]:
        """Resolve the request's attachment ids to inline image parts."""
        if not request.attachment_ids or self._attachments is None:
            return []
        return [a.to_image_part() for a in self._attachments.resolve(list(request.attachment_ids))]

    def messages_with_attachments(self, request: ChatRequest) -> List[Message]:
        """Return the history with resolved attachments appended to the last message."""
        messages = request.messages
        images = self.attachment_images(request)
        if images and messages:
            messages[-1] = messages[-1].with_images(images)
        return messages

    def system_text(self, request: ChatRequest) -> Optional[str]:
        """System prompt override, else the text of the first system message."""
        if request.system_prompt:
            return request.system_prompt
        for msg in request.messages:
            if msg.role == "system":
                return msg.text_or_joined() or None
        return None

    def active_tool_servers(self) -> List[ToolServer]:
        """Tool servers from the registry that have a non-empty URL."""
        if self._tool_servers is None:
            return []
        return [s for s in self._tool_servers.list_active_servers() if s.has_url]

    def http_client(self, purpose: str) -> httpx.Client:
        return self._http_client if self._http_client is not None else get_httpx_client(purpose)

    def unsupported_continuation(self, request: ChatRequest) -> Optional[ProviderError]:
        if request.continuation is None or self.supports_continuation:
            return None
        return build_provider_error(
            ErrorCode.INVALID_REQUEST,
            f"{self.api_type} models cannot resume a previous response",
            self.provider_for(request),
            headers={},
            model=request.model,
        )

    # -------------------------------------------------------------- streaming
    def stream(self, request: ChatRequest) -> Iterator[StreamEvent]:
        """Run one streamed interaction and yield canonical events."""
        ctx = LogContext(provider=self.provider_for(request), model=request.model, api_type=self.api_type)
        metrics = StreamMetrics()
        outcome = "complete"
        failure: Optional[ProviderError] = None
        normalized_log_event(self._logger, "stream.adapter.start", ctx, phase="start", emitted=False)
        try:
            rejected = self.unsupported_continuation(request)
            if rejected is not None:
                outcome, failure = "error", rejected
                yield ErrorEvent(rejected)
                return
            with contextlib.closing(iter(self.events(request))) as events:
                for event in events:
                    if isinstance(event, ErrorEvent):
                        outcome, failure = "error", event.error
                        yield event
                        return
                    if isinstance(event, CompleteEvent):
                        outcome = "cancelled" if request.is_cancelled else "complete"
                        yield event
                        return
                    metrics.observe(event)
                    yield event
            outcome = "cancelled" if request.is_cancelled else "complete"
            yield CompleteEvent()
        except CancelledError:
            outcome = "cancelled"
            yield CompleteEvent()
        except Exception as exc:  # noqa: BLE001 - converted to an in-band error event
            if request.is_cancelled:
                outcome = "cancelled"
                yield CompleteEvent()
                return
            failure = self.format_error(exc, request)
            outcome = "error"
            if not isinstance(exc, self.EXPECTED_ERRORS):
                self._logger.error("unexpected adapter failure", exc_info=exc)
            yield ErrorEvent(failure)
        finally:
            finalize_stream(logger=self._logger, ctx=ctx, metrics=metrics, outcome=outcome, error=failure)

    def events(self, request: ChatRequest) -> Iterator[StreamEvent]:
        """Default transport: POST the body and decode the SSE response."""
        token = request.cancellation
        if token is not None:
            token.raise_if_cancelled()
        body = self.build_body(request, streaming=True)
        headers = self.build_headers(request, streaming=True)
        decoder = self.new_decoder(request)
        sse = SSEDecoder()
        client = self.http_client("stream")
        with client.stream("POST", self.endpoint(request), json=body, headers=headers) as response:
            unregister = token.on_cancel(response.close) if token is not None else None
            try:
                if response.status_code >= 400:
                    response.read()
                    response.raise_for_status()
                try:
                    for chunk in response.iter_bytes():
                        for payload in sse.feed(chunk):
                            if token is not None:
                                token.raise_if_cancelled()
                            yield from decoder.handle(payload)
                        if token is not None:
                            token.raise_if_cancelled()
                except httpx.HTTPError as exc:
                    if not decoder.settled:
                        raise
                    self._logger.debug("transport failure after completion signal: %s", exc)
                    yield from decoder.finish()
                    return
                for payload in sse.flush():
                    yield from decoder.handle(payload)
                yield from decoder.finish()
            finally:
                if unregister is not None:
                    unregister()

    # ------------------------------------------------------------- completion
    def complete(self, request: ChatRequest) -> ChatResponse:
        """Run one buffered interaction; raises :class:`ProviderError`."""
        rejected = self.unsupported_continuation(request)
        if rejected is not None:
            raise rejected
        body = self.build_body(request, streaming=False)
        headers = self.build_headers(request, streaming=False)
        ctx = LogContext(provider=self.provider_for(request), model=request.model, api_type=self.api_type)
        try:
            response = self.http_client("complete").post(self.endpoint(request), json=body, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
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
        result = self.parse_completion(request, data if isinstance(data, dict) else {})
        normalized_log_event(
            self._logger,
            "complete.adapter.end",
            ctx.with_response(result.response_id),
            phase="complete",
            emitted=bool(result.content),
        )
        return result


__all__ = ["BaseProtocolAdapter", "FrameDecoder", "DEFAULT_PARAM_FIELDS"]
