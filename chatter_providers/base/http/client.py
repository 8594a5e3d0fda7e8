"""Shared HTTP client pool for protocol adapters.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances so
    adapters do not allocate a connection pool per request. Adapters build
    absolute URLs themselves (each request may carry its own base URL), so
    clients are keyed only by purpose.

Timeout strategy:
    Each purpose gets ``get_timeout_config().for_purpose(purpose)`` when its
    client is first created. ``"stream"`` clients use the idle stream timeout
    for reads; every other purpose uses the buffered HTTP timeout.

Lifecycle:
    All clients are closed at interpreter exit via ``atexit``. Tests may call
    :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[str, httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(purpose: str) -> httpx.Client:
    """Return the pooled ``httpx.Client`` for ``purpose`` (``"stream"``/``"complete"``)."""
    client = _CLIENTS.get(purpose)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(purpose)
        if client is not None and not client.is_closed:
            return client
        client = httpx.Client(timeout=get_timeout_config().for_purpose(purpose))
        _CLIENTS[purpose] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
