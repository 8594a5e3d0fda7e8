"""Resilience helpers (retry policy)."""

from .retry import RetryPolicy, DEFAULT_RETRY_POLICY, is_retryable_failure, retry, run_with_retry

__all__ = ["RetryPolicy", "DEFAULT_RETRY_POLICY", "is_retryable_failure", "retry", "run_with_retry"]
