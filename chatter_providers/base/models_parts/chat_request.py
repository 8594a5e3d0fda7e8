"""
Canonical, adapter-agnostic chat request.

A request is either a fresh turn carrying the full message history or a
continuation of a response the provider already holds in memory. The two are
separate types (:class:`FreshTurn` / :class:`Continuation`) so a continuation
cannot carry messages: the provider replays the conversation from its own
state and only the approval decisions are submitted.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Union

from ..cancellation import CancellationToken
from .generation_params import GenerationParams
from .message import Message


@dataclass(frozen=True)
class ApprovalDecision:
    """A caller decision on a pending tool approval request."""

    approval_request_id: str
    approve: bool


@dataclass(frozen=True)
class FreshTurn:
    messages: List[Message]


@dataclass(frozen=True)
class Continuation:
    """Resume ``previous_response_id`` by submitting approval ``decisions``."""

    previous_response_id: str
    decisions: List[ApprovalDecision] = field(default_factory=list)


Turn = Union[FreshTurn, Continuation]


@dataclass(frozen=True)
class ChatRequest:
    """Everything an adapter needs to perform one model interaction.

    Attributes:
        model: Model identifier resolved against the catalog.
        turn: :class:`FreshTurn` or :class:`Continuation`.
        api_key: Credential for the backend (filled from config when empty).
        base_url: Endpoint override; wins over the model's configured URL.
        custom_headers: Extra HTTP headers; win over model defaults.
        custom_body_params: Extra body fields; win over model defaults.
        params: Generation parameters (temperature, max tokens, ...).
        system_prompt: System instructions override.
        attachment_ids: Attachment references resolved to inline images.
        cancellation: Cooperative cancellation handle.
    """

    model: str
    turn: Turn
    api_key: str = ""
    base_url: Optional[str] = None
    custom_headers: Dict[str, str] = field(default_factory=dict)
    custom_body_params: Dict[str, Any] = field(default_factory=dict)
    params: GenerationParams = field(default_factory=GenerationParams)
    system_prompt: Optional[str] = None
    attachment_ids: List[str] = field(default_factory=list)
    cancellation: Optional[CancellationToken] = field(default=None, compare=False, repr=False)

    @classmethod
    def fresh(cls, model: str, messages: Sequence[Message], **kwargs: Any) -> "ChatRequest":
        return cls(model=model, turn=FreshTurn(list(messages)), **kwargs)

    @classmethod
    def resume(
        cls,
        model: str,
        previous_response_id: str,
        decisions: Sequence[ApprovalDecision],
        **kwargs: Any,
    ) -> "ChatRequest":
        return cls(model=model, turn=Continuation(previous_response_id, list(decisions)), **kwargs)

    @property
    def messages(self) -> List[Message]:
        """Message history; always empty for a continuation."""
        return list(self.turn.messages) if isinstance(self.turn, FreshTurn) else []

    @property
    def continuation(self) -> Optional[Continuation]:
        return self.turn if isinstance(self.turn, Continuation) else None

    @property
    def is_cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.cancelled

    def evolve(self, **changes: Any) -> "ChatRequest":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


__all__ = [
    "ApprovalDecision",
    "FreshTurn",
    "Continuation",
    "Turn",
    "ChatRequest",
]
