from __future__ import annotations

import pytest

from chatter_providers.base.errors import ErrorCode, ProviderError
from chatter_providers.base.resilience import RetryPolicy, retry, run_with_retry


class _Flaky:
    def __init__(self, fail_times: int, code: ErrorCode, retry_after=None):
        self.calls = 0
        self.fail_times = fail_times
        self.code = code
        self.retry_after = retry_after

    def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise ProviderError(code=self.code, message="boom", provider="x", retry_after_seconds=self.retry_after)
        return "ok"


def test_succeeds_after_transient_failures():
    sleeps = []
    attempt_log = []
    policy = RetryPolicy(max_attempts=3, base_delay=1.0, jitter=False, attempt_logger=lambda **kw: attempt_log.append(kw))
    flaky = _Flaky(fail_times=2, code=ErrorCode.SERVER_ERROR)

    assert run_with_retry(flaky, policy=policy, sleep=sleeps.append) == "ok"  # nosec B101
    assert flaky.calls == 3  # nosec B101
    assert sleeps == [1.0, 2.0]  # nosec B101
    assert attempt_log[-1]["error"] is None  # nosec B101
    assert [e["attempt"] for e in attempt_log] == [1, 2, 3]  # nosec B101


def test_stops_on_non_retryable():
    flaky = _Flaky(fail_times=99, code=ErrorCode.INVALID_REQUEST)
    with pytest.raises(ProviderError) as ei:
        run_with_retry(flaky, policy=RetryPolicy(max_attempts=4), sleep=lambda _s: None)
    assert ei.value.code is ErrorCode.INVALID_REQUEST  # nosec B101
    assert flaky.calls == 1  # nosec B101


def test_exhausts_attempts():
    flaky = _Flaky(fail_times=99, code=ErrorCode.TIMEOUT)
    with pytest.raises(ProviderError):
        run_with_retry(flaky, policy=RetryPolicy(max_attempts=2, jitter=False), sleep=lambda _s: None)
    assert flaky.calls == 2  # nosec B101


def test_retry_after_replaces_computed_delay():
    sleeps = []
    flaky = _Flaky(fail_times=1, code=ErrorCode.RATE_LIMIT, retry_after=7)
    run_with_retry(flaky, policy=RetryPolicy(jitter=False), sleep=sleeps.append)
    assert sleeps == [7.0]  # nosec B101


def test_delay_caps_and_jitter():
    policy = RetryPolicy(base_delay=10.0, max_delay=15.0)
    assert policy.delay_for(3, rand=lambda lo, hi: hi) == 15.0  # nosec B101
    assert policy.delay_for(1, rand=lambda lo, hi: lo) == 5.0  # nosec B101


def test_classify_maps_raw_exceptions():
    calls = []

    def op():
        calls.append(1)
        raise ValueError("boom")

    def classify(exc):
        return ProviderError(code=ErrorCode.UNKNOWN, message=str(exc), provider="x")

    with pytest.raises(ProviderError) as ei:
        run_with_retry(op, classify=classify, sleep=lambda _s: None)
    assert isinstance(ei.value.__cause__, ValueError)  # nosec B101
    assert len(calls) == 1  # nosec B101


def test_decorator():
    flaky = _Flaky(fail_times=1, code=ErrorCode.NETWORK_ERROR)

    @retry(RetryPolicy(max_attempts=2, base_delay=0.0, jitter=False))
    def run():
        return flaky()

    assert run() == "ok"  # nosec B101
    assert flaky.calls == 2  # nosec B101
