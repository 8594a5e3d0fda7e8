"""Streaming package: canonical events, SSE decoding, metrics and finalize."""

from .events import (
    ApprovalRequestEvent,
    CompleteEvent,
    ErrorEvent,
    ReasoningComplete,
    ReasoningDelta,
    StreamEvent,
    TextDelta,
    ToolCall,
    ToolCallEvent,
    ToolCallStatus,
    ToolResultEvent,
    UsageEvent,
    accumulate_text,
    is_terminal,
)
from .sse import SSEDecoder, iter_sse_payloads
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics

__all__ = [
    "ApprovalRequestEvent",
    "CompleteEvent",
    "ErrorEvent",
    "ReasoningComplete",
    "ReasoningDelta",
    "StreamEvent",
    "TextDelta",
    "ToolCall",
    "ToolCallEvent",
    "ToolCallStatus",
    "ToolResultEvent",
    "UsageEvent",
    "accumulate_text",
    "is_terminal",
    "SSEDecoder",
    "iter_sse_payloads",
    "finalize_stream",
    "StreamMetrics",
]
