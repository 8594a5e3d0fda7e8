"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
inside adapters. Adapters catch it and end the stream with a completion event,
so it never reaches callers of the service.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively."""


__all__ = ["CancelledError"]
