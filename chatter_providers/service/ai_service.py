"""
Orchestration service: model resolution, adapter selection and retry.

Purpose
-------
Single entry point for callers. ``AIService`` resolves the requested model,
picks the adapter for its ``api_type``, merges configured defaults into the
request and runs the interaction with retries.

Streaming retry rule
--------------------
A streamed attempt may be retried only while nothing from it has reached the
caller. The first forwarded event commits the attempt: a later failure is
surfaced as the terminal error instead of replaying the stream, so callers
never see duplicated text.

- At most ``max_attempts`` adapter invocations per call.
- Delay before attempt ``n + 1`` is the error's ``retry_after_seconds`` when
  present, otherwise ``2 ** n`` seconds.
- The backoff wait is interrupted by cancellation. A cancelled call ends
  with ``CompleteEvent`` and is never retried.
- Every terminal ``ErrorEvent`` forwarded to the caller carries the rendered
  chat text in ``rendered``.

Non-streaming path
------------------
``complete_with_retry`` wraps ``adapter.complete`` in the generic retry
executor and never raises: failures come back as a ``ChatResponse`` whose
``content`` is the rendered error.
"""
from __future__ import annotations

import contextlib
import logging
import time
from typing import Callable, Iterator, Mapping, Optional, Tuple, Union

from ..base.constants import UNKNOWN_PROVIDER
from ..base.errors import ErrorCode, ProviderError, build_provider_error, format_error_for_chat
from ..base.interfaces import IProtocolAdapter
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatRequest, ChatResponse, ModelConfig
from ..base.resilience import RetryPolicy, run_with_retry
from ..base.resilience.retry import is_retryable_failure
from ..base.streaming import CompleteEvent, ErrorEvent, StreamEvent, is_terminal
from ..catalog import ModelResolver
from ..config.defaults import STREAM_BACKOFF_BASE_SECONDS, STREAM_MAX_ATTEMPTS
from .request_merge import merge_model_config

Prepared = Tuple[ModelConfig, IProtocolAdapter, ChatRequest]


class AIService:
    """Resolve, adapt and run chat interactions with retries."""

    def __init__(
        self,
        resolver: ModelResolver,
        adapters: Mapping[str, IProtocolAdapter],
        *,
        sleep: Optional[Callable[[float], None]] = None,
        max_attempts: int = STREAM_MAX_ATTEMPTS,
        backoff_base: float = STREAM_BACKOFF_BASE_SECONDS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._resolver = resolver
        self._adapters = dict(adapters)
        self._sleep = sleep
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base
        self._logger = logger or get_logger("chatter.service")

    @property
    def resolver(self) -> ModelResolver:
        return self._resolver

    # ------------------------------------------------------------- resolution
    def prepare(self, request: ChatRequest) -> Union[Prepared, ProviderError]:
        """Resolve the model and adapter, returning an error when either is missing."""
        config = self._resolver.resolve(request.model)
        if config is None:
            return build_provider_error(
                ErrorCode.MODEL_NOT_FOUND,
                f"Model {request.model} not found",
                UNKNOWN_PROVIDER,
                headers={},
                model=request.model,
            )
        adapter = self._adapters.get(config.api_type)
        if adapter is None:
            return build_provider_error(
                ErrorCode.INVALID_REQUEST,
                f"Unsupported API type: {config.api_type}",
                config.provider,
                headers={},
                model=request.model,
            )
        return config, adapter, merge_model_config(request, config)

    # -------------------------------------------------------------- streaming
    def stream_with_retry(self, request: ChatRequest) -> Iterator[StreamEvent]:
        """Stream one interaction, retrying failures that happen before any output."""
        prepared = self.prepare(request)
        if isinstance(prepared, ProviderError):
            yield self._terminal_error(prepared, LogContext(provider=prepared.provider, model=request.model))
            return
        config, adapter, merged = prepared
        ctx = LogContext(provider=config.provider, model=merged.model, api_type=config.api_type)

        for attempt in range(1, self._max_attempts + 1):
            normalized_log_event(self._logger, "service.stream.attempt", ctx, phase="stream", attempt=attempt)
            forwarded = False
            failure: Optional[ProviderError] = None
            try:
                with contextlib.closing(iter(adapter.stream(merged))) as events:
                    for event in events:
                        if isinstance(event, ErrorEvent):
                            failure = event.error
                            break
                        forwarded = True
                        yield event
                        if is_terminal(event):
                            return
            except Exception as exc:  # noqa: BLE001 - adapters should not raise; classify defensively
                failure = adapter.format_error(exc, merged)
            if failure is None:
                return
            if merged.is_cancelled:
                yield CompleteEvent()
                return
            if failure.is_retryable and attempt < self._max_attempts and not forwarded:
                delay = self.backoff_delay(attempt, failure)
                normalized_log_event(
                    self._logger,
                    "service.stream.retry",
                    ctx,
                    phase="stream",
                    attempt=attempt,
                    error_code=failure.code.value,
                    emitted=False,
                    delay=delay,
                )
                if self._wait(merged, delay):
                    yield CompleteEvent()
                    return
                continue
            yield self._terminal_error(failure, ctx, attempt=attempt, emitted=forwarded)
            return

    def backoff_delay(self, attempt: int, error: ProviderError) -> float:
        """Seconds to wait after failed ``attempt`` (1-based)."""
        if error.retry_after_seconds:
            return float(error.retry_after_seconds)
        return float(self._backoff_base ** attempt)

    def _wait(self, request: ChatRequest, delay: float) -> bool:
        """Sleep ``delay`` seconds; return True if the request was cancelled."""
        token = request.cancellation
        if self._sleep is not None:
            self._sleep(delay)
        elif token is not None:
            return token.wait(delay)
        else:
            time.sleep(delay)
        return request.is_cancelled

    def _terminal_error(
        self,
        error: ProviderError,
        ctx: LogContext,
        *,
        attempt: Optional[int] = None,
        emitted: bool = False,
    ) -> ErrorEvent:
        normalized_log_event(
            self._logger,
            "service.stream.terminal_error",
            ctx,
            phase="stream",
            attempt=attempt,
            error_code=error.code.value,
            emitted=emitted,
            level=logging.WARNING,
            error=error.message,
        )
        return ErrorEvent(error, rendered=format_error_for_chat(error))

    # ------------------------------------------------------------- completion
    def complete_with_retry(self, request: ChatRequest) -> ChatResponse:
        """Run one buffered interaction; failures are returned, never raised."""
        prepared = self.prepare(request)
        if isinstance(prepared, ProviderError):
            return self._error_response(prepared, request.model)
        config, adapter, merged = prepared
        ctx = LogContext(provider=config.provider, model=merged.model, api_type=config.api_type)

        def _log_attempt(*, attempt: int, max_attempts: int, delay, error) -> None:
            normalized_log_event(
                self._logger,
                "service.complete.attempt",
                ctx,
                phase="complete",
                attempt=attempt,
                error_code=error.code.value if isinstance(error, ProviderError) else None,
                emitted=error is None,
                max_attempts=max_attempts,
                delay=delay,
            )

        policy = RetryPolicy(max_attempts=self._max_attempts, attempt_logger=_log_attempt)
        try:
            return run_with_retry(
                lambda: adapter.complete(merged),
                is_retryable_failure,
                policy,
                sleep=self._sleep or time.sleep,
                classify=lambda exc: adapter.format_error(exc, merged),
            )
        except ProviderError as err:
            return self._error_response(err, merged.model)

    @staticmethod
    def _error_response(error: ProviderError, model: str) -> ChatResponse:
        return ChatResponse(
            content=format_error_for_chat(error),
            model=model,
            provider=error.provider,
            error=error,
        )


__all__ = ["AIService"]
