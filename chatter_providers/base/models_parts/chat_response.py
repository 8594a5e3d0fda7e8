"""Final assistant message returned by non-streaming completion."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import ProviderError


@dataclass(frozen=True)
class ChatResponse:
    """Result of a buffered completion.

    When the call failed, ``content`` holds the rendered error text and
    ``error`` the classified failure, so callers can always display
    ``content``.
    """

    content: str
    model: Optional[str] = None
    provider: Optional[str] = None
    response_id: Optional[str] = None
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = ["ChatResponse"]
