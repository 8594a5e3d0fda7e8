"""Per-invocation stream metrics used for the finalize log event."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .events import StreamEvent, TextDelta, UsageEvent


@dataclass
class StreamMetrics:
    """Counters collected while an adapter stream runs.

    ``emitted`` counts non-terminal events. Time to first text and total
    duration are in milliseconds relative to :attr:`started`.
    """

    started: float = field(default_factory=time.perf_counter)
    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    usage: Optional[UsageEvent] = None

    def observe(self, event: StreamEvent) -> None:
        self.emitted += 1
        if isinstance(event, TextDelta) and self.time_to_first_token_ms is None:
            self.time_to_first_token_ms = (time.perf_counter() - self.started) * 1000.0
        if isinstance(event, UsageEvent):
            self.usage = event

    def finish(self) -> None:
        self.total_duration_ms = (time.perf_counter() - self.started) * 1000.0

    def tokens(self) -> Optional[Dict[str, Any]]:
        if self.usage is None:
            return None
        return {
            "prompt": self.usage.input_tokens,
            "completion": self.usage.output_tokens,
            "total": self.usage.total_tokens,
        }


__all__ = ["StreamMetrics"]
