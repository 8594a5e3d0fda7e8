"""Centralized timeout configuration for HTTP transports.

TimeoutConfig
    Normalized timeout values (seconds). The pooled ``httpx`` clients derive
    their ``httpx.Timeout`` from it; no other module hard-codes timeouts.

get_timeout_config()
    Process-cached configuration. Environment overrides (all optional, must be
    positive numbers):
        CHATTER_TIMEOUT_CONNECT_SECONDS   connection / stream start
        CHATTER_TIMEOUT_STREAM_SECONDS    idle read between stream chunks
        CHATTER_TIMEOUT_HTTP_SECONDS      non-streaming request read/write
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the connection / first byte.
        stream_timeout_seconds: Idle wait for the next chunk while streaming.
        http_timeout_seconds: Read/write timeout for buffered requests.
    """

    connect_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 30.0

    def for_purpose(self, purpose: str) -> httpx.Timeout:
        """Return the ``httpx.Timeout`` for a client pool purpose."""
        read = self.stream_timeout_seconds if purpose == "stream" else self.http_timeout_seconds
        return httpx.Timeout(read, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_LOCK = threading.Lock()


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; fall back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED  # noqa: PLW0603 - documented module cache
    if _CACHED is not None:
        return _CACHED
    with _LOCK:
        if _CACHED is None:
            defaults = TimeoutConfig()
            _CACHED = TimeoutConfig(
                connect_timeout_seconds=_parse_env_float(
                    "CHATTER_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds
                ),
                stream_timeout_seconds=_parse_env_float(
                    "CHATTER_TIMEOUT_STREAM_SECONDS", defaults.stream_timeout_seconds
                ),
                http_timeout_seconds=_parse_env_float(
                    "CHATTER_TIMEOUT_HTTP_SECONDS", defaults.http_timeout_seconds
                ),
            )
        return _CACHED


def reset_timeout_config() -> None:
    """Drop the cached configuration (tests adjust env at runtime)."""
    global _CACHED  # noqa: PLW0603
    with _LOCK:
        _CACHED = None


__all__ = ["TimeoutConfig", "get_timeout_config", "reset_timeout_config"]
