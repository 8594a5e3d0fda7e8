"""Generic retry executor with exponential backoff and jitter.

Used by the non-streaming completion path. Streaming uses its own loop in the
service layer because a streamed attempt may only be retried before any event
reaches the caller.

Delay for attempt ``n`` (1-based) is ``min(base_delay * 2**(n-1), max_delay)``.
An error's ``retry_after_seconds`` replaces the computed delay, and jitter
scales the result by a uniform factor in ``[0.5, 1.0]``.
"""
from __future__ import annotations

import functools
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, TypeVar

from ..errors import ProviderError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: BaseException | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    jitter: bool = True
    attempt_logger: AttemptLogger | None = None

    def delay_for(
        self,
        attempt: int,
        error: BaseException | None = None,
        rand: Callable[[float, float], float] = random.uniform,
    ) -> float:
        """Return the sleep before the attempt following ``attempt`` (1-based)."""
        delay = min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        retry_after = getattr(error, "retry_after_seconds", None)
        if isinstance(retry_after, (int, float)) and retry_after > 0:
            delay = float(retry_after)
        if self.jitter:
            delay *= rand(0.5, 1.0)
        return delay


DEFAULT_RETRY_POLICY = RetryPolicy()


def is_retryable_failure(error: BaseException) -> bool:
    """Default predicate: only classified, retryable provider errors."""
    return isinstance(error, ProviderError) and error.is_retryable


def run_with_retry(
    operation: Callable[[], T],
    is_retryable: Callable[[BaseException], bool] = is_retryable_failure,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    sleep: Callable[[float], None] = time.sleep,
    rand: Callable[[float, float], float] = random.uniform,
    classify: Optional[Callable[[BaseException], BaseException]] = None,
) -> T:
    """Run ``operation`` until it succeeds or a failure is final.

    Parameters:
        operation: Zero-argument callable to execute.
        is_retryable: Predicate deciding whether a (classified) failure may be
            retried.
        policy: Attempt budget and delay shape.
        sleep: Sleep function (injectable for tests).
        rand: Uniform random source used for jitter.
        classify: Optional mapper applied to every raised exception before the
            predicate runs; the mapped error is what gets re-raised.

    Raises:
        The last (classified) failure once attempts are exhausted or the
        predicate rejects it.
    """
    attempt = 1
    while True:
        try:
            result = operation()
        except Exception as exc:  # noqa: BLE001 - classified below
            err = classify(exc) if classify is not None else exc
            final = attempt >= policy.max_attempts or not is_retryable(err)
            delay = None if final else policy.delay_for(attempt, err, rand)
            if policy.attempt_logger:
                policy.attempt_logger(
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    delay=delay,
                    error=err,
                )
            if final:
                if err is exc:
                    raise
                raise err from exc
            sleep(delay)
            attempt += 1
            continue
        if policy.attempt_logger:
            policy.attempt_logger(
                attempt=attempt,
                max_attempts=policy.max_attempts,
                delay=None,
                error=None,
            )
        return result


def retry(
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    is_retryable: Callable[[BaseException], bool] = is_retryable_failure,
):
    """Return a decorator applying :func:`run_with_retry` to a function."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return run_with_retry(lambda: func(*args, **kwargs), is_retryable, policy)

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "is_retryable_failure",
    "run_with_retry",
    "retry",
]
