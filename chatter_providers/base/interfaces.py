"""Collaborator and adapter interfaces public surface.

Re-exports the Protocols defined under ``interfaces_parts``.
"""

from .interfaces_parts import IAttachmentStore, IModelRegistry, IProtocolAdapter, IToolServerRegistry

__all__ = ["IAttachmentStore", "IModelRegistry", "IProtocolAdapter", "IToolServerRegistry"]
