"""
Canonical provider error codes (taxonomy).

Defines the `ErrorCode` enumeration shared by every adapter, the retry layer,
and chat-visible error rendering. Values are lowercase snake_case and are a
stable public contract for logging and for callers that persist failures.

Retryability is a property of the code alone; see :func:`is_retryable_code`.
"""
from __future__ import annotations

from enum import Enum
from typing import FrozenSet


class ErrorCode(str, Enum):
    """Enumerated canonical error codes representing failure categories."""

    RATE_LIMIT = "rate_limit"
    AUTH_FAILED = "auth_failed"
    MODEL_NOT_FOUND = "model_not_found"
    QUOTA_EXCEEDED = "quota_exceeded"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


RETRYABLE_CODES: FrozenSet[ErrorCode] = frozenset(
    {
        ErrorCode.RATE_LIMIT,
        ErrorCode.SERVER_ERROR,
        ErrorCode.TIMEOUT,
        ErrorCode.NETWORK_ERROR,
    }
)


def is_retryable_code(code: ErrorCode | str) -> bool:
    """Return whether failures with ``code`` may be retried.

    Accepts the enum or its string value; unknown strings are not retryable.
    """
    try:
        return ErrorCode(code) in RETRYABLE_CODES
    except ValueError:
        return False


__all__ = ["ErrorCode", "RETRYABLE_CODES", "is_retryable_code"]
