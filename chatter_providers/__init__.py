"""
chatter_providers

Streaming adapter layer for chat models. One canonical request and event
vocabulary in front of four wire protocols (OpenAI-compatible chat
completions, the OpenAI Responses API, Anthropic messages and Gemini chat
sessions), with error classification, retries, model resolution and remote
tool-call tracking.

Typical use::

    from chatter_providers import ChatRequest, Message, build_service

    service = build_service()
    request = ChatRequest.fresh("gpt-4o", [Message("user", "Hello")])
    for event in service.stream_with_retry(request):
        ...
"""
from __future__ import annotations

from .base import (
    ApprovalDecision,
    CancellationToken,
    ChatRequest,
    ChatResponse,
    ErrorCode,
    GenerationParams,
    ImagePart,
    Message,
    ModelConfig,
    ProviderError,
    StreamEvent,
    TextPart,
    ToolServer,
    format_error_for_chat,
)
from .catalog import BUILTIN_MODELS, ModelResolver
from .di import build_service
from .service import AIService

__version__ = "0.1.0"

__all__ = [
    "AIService",
    "ApprovalDecision",
    "BUILTIN_MODELS",
    "CancellationToken",
    "ChatRequest",
    "ChatResponse",
    "ErrorCode",
    "GenerationParams",
    "ImagePart",
    "Message",
    "ModelConfig",
    "ModelResolver",
    "ProviderError",
    "StreamEvent",
    "TextPart",
    "ToolServer",
    "build_service",
    "format_error_for_chat",
    "__version__",
]
