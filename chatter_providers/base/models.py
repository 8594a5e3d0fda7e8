"""Canonical data model public surface.

Re-exports the request/response DTOs from ``models_parts`` so callers import
from one stable path.
"""

from .models_parts import (
    Attachment,
    ApprovalDecision,
    ChatRequest,
    ChatResponse,
    ContentPart,
    Continuation,
    FreshTurn,
    GenerationParams,
    ImagePart,
    Message,
    ModelConfig,
    Role,
    TextPart,
    ToolServer,
    Turn,
)

__all__ = [
    "Attachment",
    "ApprovalDecision",
    "ChatRequest",
    "ChatResponse",
    "ContentPart",
    "Continuation",
    "FreshTurn",
    "GenerationParams",
    "ImagePart",
    "Message",
    "ModelConfig",
    "Role",
    "TextPart",
    "ToolServer",
    "Turn",
]
