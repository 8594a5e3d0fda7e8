"""Canonical data model parts (one concern per module)."""

from .attachment import Attachment
from .chat_request import ApprovalDecision, ChatRequest, Continuation, FreshTurn, Turn
from .chat_response import ChatResponse
from .content_part import ContentPart, ImagePart, TextPart
from .generation_params import GenerationParams
from .message import Message, Role
from .model_config import ModelConfig
from .tool_server import ToolServer

__all__ = [
    "Attachment",
    "ApprovalDecision",
    "ChatRequest",
    "Continuation",
    "FreshTurn",
    "Turn",
    "ChatResponse",
    "ContentPart",
    "ImagePart",
    "TextPart",
    "GenerationParams",
    "Message",
    "Role",
    "ModelConfig",
    "ToolServer",
]
