"""Structured logging context object.

:class:`LogContext` carries the fields shared by every event of one adapter
invocation. Adapters create it at stream start and attach the provider's
response id once the backend announces it.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for adapter and service logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    api_type: Optional[str] = None
    response_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def with_response(self, response_id: Optional[str]) -> "LogContext":
        """Return a copy bound to ``response_id`` (no-op for ``None``)."""
        if not response_id or response_id == self.response_id:
            return self
        return replace(self, response_id=response_id, extra=dict(self.extra))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "provider": self.provider,
            "model": self.model,
            "api_type": self.api_type,
            "response_id": self.response_id,
        }
        data.update(self.extra)
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
