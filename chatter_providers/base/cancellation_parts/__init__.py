"""Cancellation parts package (token, error, internal state)."""

from .cancellation_token import CancellationToken
from .cancelled_error import CancelledError

__all__ = ["CancellationToken", "CancelledError"]
