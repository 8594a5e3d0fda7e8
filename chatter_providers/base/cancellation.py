"""Cooperative cancellation public surface.

Re-exports :class:`CancellationToken` and :class:`CancelledError` from
``cancellation_parts``.
"""

from .cancellation_parts.cancellation_token import CancellationToken
from .cancellation_parts.cancelled_error import CancelledError

__all__ = ["CancellationToken", "CancelledError"]
