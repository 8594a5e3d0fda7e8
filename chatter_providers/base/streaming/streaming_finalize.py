"""Finalize stream helper.

Emits the single consolidated log event that closes every adapter stream.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ProviderError
from ..logging import LogContext, normalized_log_event
from .streaming_metrics import StreamMetrics

_OUTCOME_EVENTS = {
    "complete": "stream.adapter.end",
    "error": "stream.adapter.error",
    "cancelled": "stream.adapter.cancelled",
}


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    outcome: str,
    error: Optional[ProviderError] = None,
) -> None:
    """Log the end of a stream with its metrics.

    ``outcome`` is ``"complete"``, ``"error"`` or ``"cancelled"``.
    """
    metrics.finish()
    normalized_log_event(
        logger,
        _OUTCOME_EVENTS.get(outcome, "stream.adapter.end"),
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        tokens=metrics.tokens(),
        error_code=error.code.value if error is not None else None,
        level=logging.WARNING if error is not None else logging.INFO,
        emitted_count=metrics.emitted,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=error.message if error is not None else None,
    )


__all__ = ["finalize_stream"]
