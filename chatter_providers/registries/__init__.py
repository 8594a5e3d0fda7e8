"""Reference implementations of the external collaborator Protocols."""
from __future__ import annotations

from .in_memory import InMemoryAttachmentStore, InMemoryModelRegistry, InMemoryToolServerRegistry

__all__ = ["InMemoryAttachmentStore", "InMemoryModelRegistry", "InMemoryToolServerRegistry"]
