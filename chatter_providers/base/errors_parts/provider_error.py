"""
Structured provider error exception type.

Carries the canonical `ErrorCode` together with the originating provider,
an optional server-supplied retry hint and the raw failure for diagnostics.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode, is_retryable_code


@dataclass
class ProviderError(Exception):
    """Represents a classified provider failure.

    Attributes:
        code: Canonical :class:`ErrorCode` for the failure.
        message: Human-readable error message.
        provider: Display name of the backend that failed (e.g. ``"OpenAI"``).
        retry_after_seconds: Server-supplied (or defaulted) wait before retrying.
        original_error: The raw exception or payload that was classified.
        request_id: Provider request id for support correlation, when known.
        model: Model identifier associated with the failure.
    """

    code: ErrorCode
    message: str
    provider: str
    retry_after_seconds: Optional[int] = None
    original_error: Any = None
    request_id: Optional[str] = None
    model: Optional[str] = None

    @property
    def is_retryable(self) -> bool:
        """Whether the failure may be retried (derived from ``code`` only)."""
        return is_retryable_code(self.code)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
