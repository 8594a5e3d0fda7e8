"""IModelRegistry Protocol (single-class module)."""

from __future__ import annotations

from typing import Any, List, Mapping, Protocol, runtime_checkable


@runtime_checkable
class IModelRegistry(Protocol):
    """Read-only source of user-defined model configurations.

    Records are ``ModelConfig``-shaped mappings (camelCase keys accepted).
    """

    def list_active_custom_models(self) -> List[Mapping[str, Any]]:
        ...


__all__ = ["IModelRegistry"]
