"""Chat-visible rendering of :class:`ProviderError` values."""
from __future__ import annotations

from .error_code import ErrorCode
from .provider_error import ProviderError


def _hint(error: ProviderError) -> str | None:
    if error.code is ErrorCode.RATE_LIMIT and error.retry_after_seconds:
        return f"Please wait {error.retry_after_seconds} seconds before trying again."
    if error.code is ErrorCode.AUTH_FAILED:
        return "Please check your API key in Settings."
    if error.code is ErrorCode.QUOTA_EXCEEDED:
        return "Your API quota has been exceeded. Please check your billing."
    if error.code is ErrorCode.MODEL_NOT_FOUND:
        return "This model may not be available with your current API plan."
    if error.is_retryable:
        return "This is a temporary issue. Please try again."
    return None


def format_error_for_chat(error: ProviderError) -> str:
    """Render ``error`` as the multi-line string shown in place of a reply.

    Lines: the message, the provider, the request id (when known) and a
    code-specific hint (when one applies).
    """
    lines = [f"❌ Error: {error.message}", f"Provider: {error.provider}"]
    if error.request_id:
        lines.append(f"Request ID: {error.request_id}")
    hint = _hint(error)
    if hint:
        lines.append(hint)
    return "\n".join(lines)


__all__ = ["format_error_for_chat"]
