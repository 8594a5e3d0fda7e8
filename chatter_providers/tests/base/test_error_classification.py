from __future__ import annotations

import types

import httpx
import pytest

from chatter_providers.base.errors import (
    ErrorCode,
    ProviderError,
    build_provider_error,
    classify_failure,
    is_retryable_code,
    parse_block_stream_error,
    parse_event_typed_frame,
    parse_retry_after,
    parse_session_error,
    parse_token_delta_error,
)


def _status_error(status: int, body=None, headers=None) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://api.example.test/v1/chat/completions")
    response = httpx.Response(status, json=body if body is not None else {}, headers=headers or {}, request=request)
    return httpx.HTTPStatusError(f"status {status}", request=request, response=response)


def test_provider_error_passthrough():
    err = ProviderError(code=ErrorCode.AUTH_FAILED, message="nope", provider="OpenAI")
    assert classify_failure(err, "Other") is err  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.parametrize(
    "status, code",
    [
        (401, ErrorCode.AUTH_FAILED),
        (402, ErrorCode.QUOTA_EXCEEDED),
        (403, ErrorCode.QUOTA_EXCEEDED),
        (404, ErrorCode.MODEL_NOT_FOUND),
        (408, ErrorCode.TIMEOUT),
        (429, ErrorCode.RATE_LIMIT),
        (500, ErrorCode.SERVER_ERROR),
        (502, ErrorCode.SERVER_ERROR),
        (503, ErrorCode.SERVER_ERROR),
    ],
)
def test_http_status_mapping(status, code):
    assert classify_failure(types.SimpleNamespace(status_code=status), "OpenAI").code is code  # nosec B101


def test_status_read_from_nested_response():
    failure = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_failure(failure, "OpenAI").code is ErrorCode.SERVER_ERROR  # nosec B101


def test_unmapped_status_falls_through_to_message():
    failure = types.SimpleNamespace(status_code=418)
    err = classify_failure(failure, "OpenAI", message="teapot")
    assert err.code is ErrorCode.UNKNOWN  # nosec B101


def test_transport_exceptions():
    request = httpx.Request("GET", "https://api.example.test")
    assert classify_failure(httpx.ReadTimeout("slow", request=request), "x").code is ErrorCode.TIMEOUT  # nosec B101
    assert classify_failure(httpx.ConnectError("refused", request=request), "x").code is ErrorCode.NETWORK_ERROR  # nosec B101


@pytest.mark.parametrize(
    "message, code",
    [
        ("Rate limit reached for requests", ErrorCode.RATE_LIMIT),
        ("Invalid API key provided", ErrorCode.AUTH_FAILED),
        ("authentication required", ErrorCode.AUTH_FAILED),
        ("You exceeded your current quota", ErrorCode.QUOTA_EXCEEDED),
        ("monthly limit hit", ErrorCode.QUOTA_EXCEEDED),
        ("request timeout", ErrorCode.TIMEOUT),
        ("something odd", ErrorCode.UNKNOWN),
    ],
)
def test_message_heuristics(message, code):
    assert classify_failure(Exception(message), "x").code is code  # nosec B101


def test_rate_limit_defaults_retry_after():
    err = classify_failure(types.SimpleNamespace(status_code=429), "OpenAI")
    assert err.retry_after_seconds == 30  # nosec B101
    assert err.is_retryable  # nosec B101


def test_retry_after_header_wins():
    err = parse_token_delta_error(_status_error(429, headers={"retry-after": "2"}), "OpenAI")
    assert err.retry_after_seconds == 2  # nosec B101


def test_request_id_from_headers():
    err = parse_token_delta_error(_status_error(500, headers={"x-request-id": "req_123"}), "OpenAI")
    assert err.request_id == "req_123"  # nosec B101


def test_parse_retry_after_values():
    assert parse_retry_after("1.5") == 2  # nosec B101
    assert parse_retry_after("") is None  # nosec B101
    assert parse_retry_after(None) is None  # nosec B101
    assert parse_retry_after("soon") is None  # nosec B101
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0  # nosec B101


def test_retryable_codes():
    retryable = {c for c in ErrorCode if is_retryable_code(c)}
    expected = {ErrorCode.RATE_LIMIT, ErrorCode.SERVER_ERROR, ErrorCode.TIMEOUT, ErrorCode.NETWORK_ERROR}
    assert retryable == expected  # nosec B101
    assert not is_retryable_code("nonsense")  # nosec B101


def test_build_provider_error_fills_unknown_message():
    err = build_provider_error(ErrorCode.UNKNOWN, "", "OpenAI", headers={})
    assert err.message == "Unknown error occurred"  # nosec B101


def test_token_delta_body_message():
    err = parse_token_delta_error(
        _status_error(401, body={"error": {"message": "Incorrect API key provided"}}), "xAI", "grok-4"
    )
    assert err.code is ErrorCode.AUTH_FAILED  # nosec B101
    assert err.message == "Incorrect API key provided"  # nosec B101
    assert err.provider == "xAI"  # nosec B101
    assert err.model == "grok-4"  # nosec B101


def test_event_typed_frames():
    http_err = parse_event_typed_frame({"type": "error", "code": "http_error", "message": "tool server down"}, "OpenAI")
    assert http_err.code is ErrorCode.NETWORK_ERROR  # nosec B101
    assert http_err.message == "tool server down"  # nosec B101

    nested = parse_event_typed_frame({"type": "error", "error": {"message": "bad thing"}}, "OpenAI")
    assert nested.code is ErrorCode.UNKNOWN  # nosec B101
    assert nested.message == "bad thing"  # nosec B101

    failed = parse_event_typed_frame(
        {"type": "response.failed", "response": {"error": {"message": "model crashed"}}}, "OpenAI"
    )
    assert failed.code is ErrorCode.SERVER_ERROR  # nosec B101
    assert failed.message == "model crashed"  # nosec B101


def test_block_stream_credit_is_quota():
    err = parse_block_stream_error(
        _status_error(400, body={"type": "error", "error": {"type": "invalid_request_error", "message": "Your credit balance is too low"}}),
        "Anthropic",
    )
    assert err.code is ErrorCode.QUOTA_EXCEEDED  # nosec B101


def test_block_stream_other_400_is_invalid_request():
    err = parse_block_stream_error(
        _status_error(400, body={"type": "error", "error": {"type": "invalid_request_error", "message": "max_tokens too big"}}),
        "Anthropic",
    )
    assert err.code is ErrorCode.INVALID_REQUEST  # nosec B101
    assert err.message == "max_tokens too big"  # nosec B101


def test_block_stream_in_band_frame():
    err = parse_block_stream_error(
        {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}, "Anthropic"
    )
    assert err.code is ErrorCode.SERVER_ERROR  # nosec B101
    assert err.message == "Overloaded"  # nosec B101


def test_session_error_uses_sdk_code():
    failure = types.SimpleNamespace(code=429, message="Resource has been exhausted", status="RESOURCE_EXHAUSTED")
    err = parse_session_error(failure, "Gemini", "gemini-2.5-flash")
    assert err.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert err.message == "Resource has been exhausted"  # nosec B101
