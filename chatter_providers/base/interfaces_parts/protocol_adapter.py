"""IProtocolAdapter Protocol (single-class module).

One adapter per wire protocol. The orchestration service selects an adapter
by ``ModelConfig.api_type`` and drives it through this interface only.
"""

from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable

from ..errors import ProviderError
from ..models import ChatRequest, ChatResponse
from ..streaming import StreamEvent


@runtime_checkable
class IProtocolAdapter(Protocol):
    """Contract shared by every protocol adapter.

    ``stream`` never raises for provider or transport failures; it yields a
    terminal ``ErrorEvent`` instead, and ends with ``CompleteEvent`` when the
    request is cancelled. ``complete`` raises :class:`ProviderError`.
    """

    api_type: str

    def stream(self, request: ChatRequest) -> Iterator[StreamEvent]:
        ...

    def complete(self, request: ChatRequest) -> ChatResponse:
        ...

    def format_error(self, exc: BaseException, request: ChatRequest) -> ProviderError:
        """Classify ``exc`` using this adapter's error body shape."""
        ...


__all__ = ["IProtocolAdapter"]
