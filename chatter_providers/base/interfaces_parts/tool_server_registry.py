"""IToolServerRegistry Protocol (single-class module).

Consumed only by adapters whose protocol supports remote tool servers.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from ..models import ToolServer


@runtime_checkable
class IToolServerRegistry(Protocol):
    """Read-only list of the tool servers the user enabled."""

    def list_active_servers(self) -> List[ToolServer]:
        ...


__all__ = ["IToolServerRegistry"]
