"""Base shared constants for protocol adapters.

Central location for wire-level strings that must be reproduced exactly.
There are no credentials in this module.
"""
from __future__ import annotations

# Server-sent events framing
SSE_DATA_PREFIX = "data: "
SSE_DONE_SENTINEL = "[DONE]"
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"
JSON_MEDIA_TYPE = "application/json"

# Adapter selector tags (ModelConfig.api_type)
API_CHAT_COMPLETIONS = "openai-chat-completions"
API_RESPONSES = "openai-responses"
API_ANTHROPIC = "anthropic"
API_GEMINI = "gemini"

# Anthropic messages protocol
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_MCP_BETA = "mcp-client-2025-04-04"
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

# Inline image fallback
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

# Turn-based session system prompt emulation
SESSION_SYSTEM_PREFIX = "System: "
SESSION_SYSTEM_ACK = "Understood. I will follow these instructions."

# Provider label used when no model configuration could be found
UNKNOWN_PROVIDER = "Unknown"

__all__ = [
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
    "EVENT_STREAM_MEDIA_TYPE",
    "JSON_MEDIA_TYPE",
    "API_CHAT_COMPLETIONS",
    "API_RESPONSES",
    "API_ANTHROPIC",
    "API_GEMINI",
    "ANTHROPIC_VERSION",
    "ANTHROPIC_MCP_BETA",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "DEFAULT_IMAGE_MIME_TYPE",
    "SESSION_SYSTEM_PREFIX",
    "SESSION_SYSTEM_ACK",
    "UNKNOWN_PROVIDER",
]
