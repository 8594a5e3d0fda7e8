"""Unified provider error taxonomy public surface.

This module re-exports the one-concern-per-file implementations under
``chatter_providers.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode, RETRYABLE_CODES, is_retryable_code
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_failure, build_provider_error, parse_retry_after
from .errors_parts.provider_shapes import (
    parse_block_stream_error,
    parse_event_typed_error,
    parse_event_typed_frame,
    parse_session_error,
    parse_token_delta_error,
)
from .errors_parts.rendering import format_error_for_chat

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
