"""Interface parts package (one Protocol per module)."""

from .attachment_store import IAttachmentStore
from .model_registry import IModelRegistry
from .protocol_adapter import IProtocolAdapter
from .tool_server_registry import IToolServerRegistry

__all__ = ["IAttachmentStore", "IModelRegistry", "IProtocolAdapter", "IToolServerRegistry"]
