"""Protocol adapters.

One adapter per wire protocol family, selected by ``ModelConfig.api_type``:

- ``openai-chat-completions``: :class:`ChatCompletionsAdapter`
- ``openai-responses``: :class:`ResponsesAdapter`
- ``anthropic``: :class:`MessagesAdapter`
- ``gemini``: :class:`GeminiSessionAdapter`
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .base import BaseProtocolAdapter, FrameDecoder
from .chat_completions import ChatCompletionsAdapter, provider_from_base_url
from .gemini_session import GeminiSessionAdapter
from .messages import MessagesAdapter
from .responses import ResponsesAdapter
from .responses_decoder import ResponsesStreamDecoder
from .tool_tracking import ToolCallTracker


def default_adapters(*, gemini_client_factory: Optional[Any] = None, **kwargs: Any) -> Dict[str, BaseProtocolAdapter]:
    """Return one adapter per api type sharing the given collaborators.

    ``kwargs`` are passed to every adapter (``http_client``, ``attachments``,
    ``tool_servers``, ``logger``).
    """
    adapters = [
        ChatCompletionsAdapter(**kwargs),
        ResponsesAdapter(**kwargs),
        MessagesAdapter(**kwargs),
        GeminiSessionAdapter(client_factory=gemini_client_factory, **kwargs),
    ]
    return {a.api_type: a for a in adapters}


__all__ = [
    "BaseProtocolAdapter",
    "FrameDecoder",
    "ChatCompletionsAdapter",
    "ResponsesAdapter",
    "ResponsesStreamDecoder",
    "MessagesAdapter",
    "GeminiSessionAdapter",
    "ToolCallTracker",
    "default_adapters",
    "provider_from_base_url",
]
