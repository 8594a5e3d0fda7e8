"""Canonical stream events emitted by every adapter.

Each variant is a small frozen dataclass with a ``type`` discriminator. The
union :data:`StreamEvent` is closed: adapters only ever yield these types.

Terminal variants are :class:`ErrorEvent` and :class:`CompleteEvent`; exactly
one of them ends every adapter invocation and nothing follows it.

Tool-call events carry a snapshot of the correlated :class:`ToolCall` record
so later updates to the record never alter an event the caller already holds.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, Iterable, Optional, Union

from ..errors import ProviderError


class ToolCallStatus(str, Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def rank(self) -> int:
        """Lifecycle order; completed and failed share the final rank."""
        return _STATUS_RANK[self]

    @property
    def is_final(self) -> bool:
        return self in (ToolCallStatus.COMPLETED, ToolCallStatus.FAILED)


_STATUS_RANK = {
    ToolCallStatus.PENDING: 0,
    ToolCallStatus.EXECUTING: 1,
    ToolCallStatus.COMPLETED: 2,
    ToolCallStatus.FAILED: 2,
}


@dataclass(frozen=True)
class ToolCall:
    """State of one remote tool invocation."""

    id: str
    name: str = ""
    arguments: str = ""
    server_label: str = ""
    status: ToolCallStatus = ToolCallStatus.PENDING
    result: Optional[str] = None
    error: Optional[str] = None

    def evolve(self, **changes) -> "ToolCall":
        return replace(self, **changes)


@dataclass(frozen=True)
class TextDelta:
    type: ClassVar[str] = "text-delta"
    text: str


@dataclass(frozen=True)
class ReasoningDelta:
    type: ClassVar[str] = "reasoning-delta"
    text: str


@dataclass(frozen=True)
class ReasoningComplete:
    type: ClassVar[str] = "reasoning-complete"
    text: str


@dataclass(frozen=True)
class ToolCallEvent:
    type: ClassVar[str] = "tool-call"
    call: ToolCall


@dataclass(frozen=True)
class ToolResultEvent:
    type: ClassVar[str] = "tool-result"
    call: ToolCall


@dataclass(frozen=True)
class ApprovalRequestEvent:
    """A tool call waiting for a caller decision.

    ``response_id`` is the opaque continuation token; the caller must keep it
    until the decision is submitted through a continuation request.
    """

    type: ClassVar[str] = "approval-request"
    id: str
    name: str
    arguments: str
    server_label: str
    response_id: Optional[str]


@dataclass(frozen=True)
class UsageEvent:
    type: ClassVar[str] = "usage"
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    @classmethod
    def build(cls, input_tokens: Optional[int], output_tokens: Optional[int], total: Optional[int] = None) -> "UsageEvent":
        if total is None and input_tokens is not None and output_tokens is not None:
            total = input_tokens + output_tokens
        return cls(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total)


@dataclass(frozen=True)
class ErrorEvent:
    """Terminal failure. ``rendered`` is filled by the service before forwarding."""

    type: ClassVar[str] = "error"
    error: ProviderError
    rendered: Optional[str] = None


@dataclass(frozen=True)
class CompleteEvent:
    type: ClassVar[str] = "complete"
    response_id: Optional[str] = None


StreamEvent = Union[
    TextDelta,
    ReasoningDelta,
    ReasoningComplete,
    ToolCallEvent,
    ToolResultEvent,
    ApprovalRequestEvent,
    UsageEvent,
    ErrorEvent,
    CompleteEvent,
]


def is_terminal(event: StreamEvent) -> bool:
    """Return True for events that end a stream."""
    return isinstance(event, (ErrorEvent, CompleteEvent))


def accumulate_text(events: Iterable[StreamEvent]) -> str:
    """Concatenate the text of every :class:`TextDelta` in ``events``."""
    return "".join(e.text for e in events if isinstance(e, TextDelta))


__all__ = [
    "ToolCallStatus",
    "ToolCall",
    "TextDelta",
    "ReasoningDelta",
    "ReasoningComplete",
    "ToolCallEvent",
    "ToolResultEvent",
    "ApprovalRequestEvent",
    "UsageEvent",
    "ErrorEvent",
    "CompleteEvent",
    "StreamEvent",
    "is_terminal",
    "accumulate_text",
]
