"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `chatter_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode, RETRYABLE_CODES, is_retryable_code
from .provider_error import ProviderError
from .classification import classify_failure, build_provider_error, parse_retry_after
from .provider_shapes import (
    parse_block_stream_error,
    parse_event_typed_error,
    parse_event_typed_frame,
    parse_session_error,
    parse_token_delta_error,
)
from .rendering import format_error_for_chat

__all__ = [
    "ErrorCode",
    "RETRYABLE_CODES",
    "is_retryable_code",
    "ProviderError",
    "classify_failure",
    "build_provider_error",
    "parse_retry_after",
    "parse_token_delta_error",
    "parse_event_typed_error",
    "parse_event_typed_frame",
    "parse_block_stream_error",
    "parse_session_error",
    "format_error_for_chat",
]
