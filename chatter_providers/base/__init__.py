"""
Providers Base Package

Provider-agnostic building blocks shared by the adapters and the service:

- Errors: canonical taxonomy, classification and chat rendering
- Models (DTOs): requests, responses, model and tool-server configuration
- Streaming: canonical events, SSE decoding and finalize logging
- Interfaces: collaborator and adapter Protocols
- Resilience / cancellation / timeouts / logging
"""

from .errors import ErrorCode, ProviderError, classify_failure, format_error_for_chat
from .cancellation import CancellationToken, CancelledError
from .models import (
    ApprovalDecision,
    Attachment,
    ChatRequest,
    ChatResponse,
    Continuation,
    FreshTurn,
    GenerationParams,
    ImagePart,
    Message,
    ModelConfig,
    TextPart,
    ToolServer,
)
from .streaming import StreamEvent, SSEDecoder, StreamMetrics, finalize_stream
from .interfaces import IAttachmentStore, IModelRegistry, IProtocolAdapter, IToolServerRegistry
from .resilience import RetryPolicy, run_with_retry
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_failure",
    "format_error_for_chat",
    "CancellationToken",
    "CancelledError",
    "ApprovalDecision",
    "Attachment",
    "ChatRequest",
    "ChatResponse",
    "Continuation",
    "FreshTurn",
    "GenerationParams",
    "ImagePart",
    "Message",
    "ModelConfig",
    "TextPart",
    "ToolServer",
    "StreamEvent",
    "SSEDecoder",
    "StreamMetrics",
    "finalize_stream",
    "IAttachmentStore",
    "IModelRegistry",
    "IProtocolAdapter",
    "IToolServerRegistry",
    "RetryPolicy",
    "run_with_retry",
    "TimeoutConfig",
    "get_timeout_config",
]
