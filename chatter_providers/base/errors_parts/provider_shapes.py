"""
Per-family error body normalizers.

Each provider family nests its error message differently. The functions here
are small and side-effect free: they pull ``(status, message)`` out of the
family's body shape and hand off to :func:`classify_failure`.

Families:
    token-delta   OpenAI-compatible chat completions (``error.message``).
    event-typed   Responses streams; also handles in-band ``error`` frames.
    block-stream  Anthropic messages (``error.error.message``).
    session       Gemini SDK errors (top-level ``message`` and ``code``).
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from .classification import build_provider_error, classify_failure, code_for, _extract_status
from .error_code import ErrorCode
from .provider_error import ProviderError


def _dig(data: Any, *keys: str) -> Any:
    cur = data
    for key in keys:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
    return cur


def _response_json(exc: Any) -> Any:
    """Return the decoded JSON body of ``exc.response`` or ``None``."""
    resp = getattr(exc, "response", None)
    if not isinstance(resp, httpx.Response):
        return None
    try:
        return resp.json()
    except (ValueError, httpx.StreamError):
        return None


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def parse_token_delta_error(exc: Any, provider: str, model: Optional[str] = None) -> ProviderError:
    """Normalize an OpenAI-compatible failure (``{"error": {"message": ...}}``)."""
    if isinstance(exc, ProviderError):
        return exc
    body = _response_json(exc)
    message = (
        _str_or_none(_dig(body, "error", "message"))
        or _str_or_none(_dig(getattr(exc, "body", None), "error", "message"))
        or _str_or_none(getattr(exc, "message", None))
        or (str(exc) if exc is not None else None)
    )
    return classify_failure(exc, provider, message=message, model=model)


def parse_event_typed_error(exc: Any, provider: str, model: Optional[str] = None) -> ProviderError:
    """Normalize a Responses API failure raised outside the event stream."""
    return parse_token_delta_error(exc, provider, model)


def parse_event_typed_frame(frame: Mapping[str, Any], provider: str, model: Optional[str] = None) -> ProviderError:
    """Convert an in-band ``error`` / ``response.failed`` frame.

    ``error`` frames carry ``code`` and ``message`` either at the top level or
    under ``error``. A ``http_error`` code indicates the provider failed to
    reach a remote tool server and is reported as a network error.
    """
    if frame.get("type") == "response.failed":
        message = (
            _str_or_none(_dig(frame, "response", "error", "message"))
            or "Response failed"
        )
        return build_provider_error(ErrorCode.SERVER_ERROR, message, provider, original=dict(frame), headers={}, model=model)
    nested = frame.get("error") if isinstance(frame.get("error"), Mapping) else {}
    wire_code = frame.get("code") or nested.get("code")
    message = (
        _str_or_none(frame.get("message"))
        or _str_or_none(nested.get("message"))
        or "Stream error"
    )
    code = ErrorCode.NETWORK_ERROR if wire_code == "http_error" else ErrorCode.UNKNOWN
    return build_provider_error(code, message, provider, original=dict(frame), headers={}, model=model)


_BLOCK_ERROR_TYPE_STATUS = {
    "invalid_request_error": 400,
    "authentication_error": 401,
    "permission_error": 403,
    "not_found_error": 404,
    "rate_limit_error": 429,
    "api_error": 500,
    "overloaded_error": 503,
}


def parse_block_stream_error(failure: Any, provider: str, model: Optional[str] = None) -> ProviderError:
    """Normalize an Anthropic failure (exception or in-band ``error`` frame).

    Body shape: ``{"type": "error", "error": {"type": ..., "message": ...}}``.
    A 400 mentioning credit is a billing problem; other 400s are invalid
    requests.
    """
    if isinstance(failure, ProviderError):
        return failure
    if isinstance(failure, Mapping):
        body: Any = failure
        status = None
        headers: Mapping[str, str] = {}
        original: Any = dict(failure)
    else:
        body = _response_json(failure)
        status = _extract_status(failure)
        headers = {}
        original = failure
        resp = getattr(failure, "response", None)
        if resp is not None and isinstance(getattr(resp, "headers", None), Mapping):
            headers = resp.headers
    message = (
        _str_or_none(_dig(body, "error", "message"))
        or _str_or_none(_dig(body, "error", "error", "message"))
        or _str_or_none(getattr(failure, "message", None))
        or (str(failure) if not isinstance(failure, Mapping) else None)
        or "Stream error"
    )
    if status is None:
        status = _BLOCK_ERROR_TYPE_STATUS.get(_dig(body, "error", "type"))
    if status == 400:
        code = ErrorCode.QUOTA_EXCEEDED if "credit" in message.lower() else ErrorCode.INVALID_REQUEST
        return build_provider_error(code, message, provider, original=original, headers=headers, model=model)
    if isinstance(failure, Mapping):
        code = code_for(status, None, message)
        return build_provider_error(code, message, provider, original=original, headers=headers, model=model)
    return classify_failure(failure, provider, status=status, message=message, model=model)


def parse_session_error(exc: Any, provider: str, model: Optional[str] = None) -> ProviderError:
    """Normalize a Gemini SDK failure (``code`` status + top-level ``message``)."""
    if isinstance(exc, ProviderError):
        return exc
    status = _extract_status(exc)
    sdk_code = getattr(exc, "code", None)
    if status is None and isinstance(sdk_code, int) and 100 <= sdk_code < 600:
        status = sdk_code
    message = _str_or_none(getattr(exc, "message", None)) or str(exc)
    return classify_failure(exc, provider, status=status, message=message, model=model)


__all__ = [
    "parse_token_delta_error",
    "parse_event_typed_error",
    "parse_event_typed_frame",
    "parse_block_stream_error",
    "parse_session_error",
]
