"""Request-scoped cancellation handle.

A caller keeps the token and calls :meth:`CancellationToken.cancel` from any
thread. Adapters check it between decoded frames and register a callback
that closes the live HTTP response, which unblocks a read waiting on the
network. The service waits on it during retry backoff.
"""

from __future__ import annotations

import contextlib
from threading import Event, Lock
from typing import Callable, Optional

from .cancelled_error import CancelledError
from .state import State


class CancellationToken:
    """Thread-safe, one-shot cancellation flag with close callbacks.

    Callbacks run once, on the cancelling thread. A callback registered after
    cancellation runs immediately on the registering thread.
    """

    def __init__(self) -> None:
        self._state = State()
        self._lock = Lock()
        self._fired = Event()

    @property
    def cancelled(self) -> bool:
        return self._fired.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._state.reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Mark the token cancelled and run pending callbacks; idempotent."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            pending, self._state.callbacks = self._state.callbacks, []
        self._fired.set()
        for callback in pending:
            # one failing close must not skip the rest
            with contextlib.suppress(Exception):
                callback()

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Run ``callback`` on cancellation; returns an unregister function."""
        with self._lock:
            if not self._state.cancelled:
                self._state.callbacks.append(callback)
                return lambda: self._forget(callback)
        callback()
        return lambda: None

    def _forget(self, callback: Callable[[], None]) -> None:
        with self._lock, contextlib.suppress(ValueError):
            self._state.callbacks.remove(callback)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on cancellation.

        Returns whether the token is cancelled.
        """
        return self._fired.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise CancelledError(self._state.reason or "request cancelled")

    def __repr__(self) -> str:  # pragma: no cover
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancellationToken"]
