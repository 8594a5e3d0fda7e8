"""
Error classification helpers mapping raw failures to :class:`ProviderError`.

Implements the shared rule table used by every provider family:

1. ``ProviderError`` passthrough.
2. Explicit HTTP status mapping.
3. Native transport exceptions (``httpx`` timeouts / transport errors).
4. Lower-cased message substring heuristics.
5. ``UNKNOWN`` fallback.

Family-specific body extraction lives in ``provider_shapes``; those wrappers
normalize a body to ``(status, message)`` and then delegate here.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Mapping, Optional

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError

DEFAULT_RATE_LIMIT_RETRY_AFTER = 30
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


def _extract_status(exc: Any) -> Optional[int]:
    """Attempt to extract an HTTP status code from a failure object.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def _extract_headers(exc: Any) -> Mapping[str, str]:
    """Return response headers attached to ``exc`` (empty mapping if none)."""
    headers = getattr(exc, "headers", None)
    if headers is None:
        resp = getattr(exc, "response", None)
        headers = getattr(resp, "headers", None) if resp is not None else None
    return headers if isinstance(headers, Mapping) else {}


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup that works for plain dicts too."""
    if isinstance(headers, httpx.Headers):
        return headers.get(name)
    lowered = name.lower()
    for key, value in headers.items():
        if str(key).lower() == lowered:
            return value
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    401: ErrorCode.AUTH_FAILED,
    402: ErrorCode.QUOTA_EXCEEDED,
    403: ErrorCode.QUOTA_EXCEEDED,
    404: ErrorCode.MODEL_NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.SERVER_ERROR,
    503: ErrorCode.SERVER_ERROR,
}


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    """Substring heuristic for failures without a mapped HTTP status.

    Order matters: ``"rate limit"`` must win over the broader ``"limit"``.
    """
    pattern_groups = (
        (ErrorCode.RATE_LIMIT, ("rate limit",)),
        (ErrorCode.AUTH_FAILED, ("auth", "api key")),
        (ErrorCode.QUOTA_EXCEEDED, ("quota", "limit")),
        (ErrorCode.TIMEOUT, ("timeout",)),
    )
    for code, patterns in pattern_groups:
        if any(p in msg for p in patterns):
            return code
    return None


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Parse a ``retry-after`` header value into whole seconds.

    Accepts delta-seconds (``"2"``, ``"1.5"``) or an HTTP date. Returns ``None``
    for missing or unparseable values.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return max(0, math.ceil(float(text)))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    delta = (when - datetime.now(timezone.utc)).total_seconds()
    return max(0, math.ceil(delta))


def _extract_request_id(exc: Any, headers: Mapping[str, str]) -> Optional[str]:
    rid = getattr(exc, "request_id", None)
    if isinstance(rid, str) and rid:
        return rid
    return _header(headers, "x-request-id") or _header(headers, "request-id")


def code_for(status: Optional[int], exc: Any, message: str) -> ErrorCode:
    """Return the canonical code for a failure using the shared rule table."""
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return ErrorCode.NETWORK_ERROR
    code = _heuristic_from_message(message.lower())
    return code if code is not None else ErrorCode.UNKNOWN


def build_provider_error(
    code: ErrorCode,
    message: str,
    provider: str,
    *,
    original: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    model: Optional[str] = None,
) -> ProviderError:
    """Construct a :class:`ProviderError` filling retry hint and request id.

    ``retry_after_seconds`` comes from a ``retry-after`` header when present,
    otherwise defaults to 30 seconds for rate limits.
    """
    hdrs = headers if headers is not None else _extract_headers(original)
    retry_after = parse_retry_after(_header(hdrs, "retry-after"))
    if retry_after is None and code is ErrorCode.RATE_LIMIT:
        retry_after = DEFAULT_RATE_LIMIT_RETRY_AFTER
    return ProviderError(
        code=code,
        message=message or UNKNOWN_ERROR_MESSAGE,
        provider=provider,
        retry_after_seconds=retry_after,
        original_error=original,
        request_id=_extract_request_id(original, hdrs),
        model=model,
    )


def classify_failure(
    failure: Any,
    provider: str,
    *,
    status: Optional[int] = None,
    message: Optional[str] = None,
    model: Optional[str] = None,
) -> ProviderError:
    """Classify an arbitrary failure into a :class:`ProviderError`.

    Parameters:
        failure: Exception or raw record being classified.
        provider: Display name of the backend.
        status: Status already extracted by a family wrapper (optional).
        message: Message already extracted by a family wrapper (optional).
        model: Model identifier for context.
    """
    if isinstance(failure, ProviderError):
        return failure
    if status is None:
        status = _extract_status(failure)
    text = message if message else (str(failure) if failure is not None else "")
    code = code_for(status, failure, text)
    return build_provider_error(code, text, provider, original=failure, model=model)


__all__ = [
    "classify_failure",
    "build_provider_error",
    "code_for",
    "parse_retry_after",
    "DEFAULT_RATE_LIMIT_RETRY_AFTER",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
