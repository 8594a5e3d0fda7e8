"""Built-in model catalog.

Static, read-only configurations for the models that ship with the package.
Entries are grouped by family; OpenAI-compatible third-party hosts carry
their own ``base_url``. User-defined models come from the external registry
(see :mod:`chatter_providers.catalog.resolution`).
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..base.constants import API_ANTHROPIC, API_CHAT_COMPLETIONS, API_GEMINI, API_RESPONSES
from ..base.models import ModelConfig
from ..config.defaults import (
    DEEPSEEK_DEFAULT_BASE_URL,
    GROQ_DEFAULT_BASE_URL,
    MOONSHOT_DEFAULT_BASE_URL,
    XAI_DEFAULT_BASE_URL,
)


def _model(
    model_id: str,
    name: str,
    context_window: int,
    provider: str,
    api_type: str,
    *,
    base_url: Optional[str] = None,
    is_new: bool = False,
    reasoning: bool = False,
    mcp: bool = False,
) -> ModelConfig:
    return ModelConfig(
        id=model_id,
        name=name,
        context_window=context_window,
        provider=provider,
        api_type=api_type,
        base_url=base_url,
        is_new=is_new,
        supports_reasoning_effort=reasoning,
        supports_mcp=mcp,
    )


def _openai(model_id: str, name: str, window: int, *, is_new: bool = False, reasoning: bool = False) -> ModelConfig:
    return _model(model_id, name, window, "openai", API_RESPONSES, is_new=is_new, reasoning=reasoning, mcp=True)


def _claude(model_id: str, name: str, *, is_new: bool = False) -> ModelConfig:
    return _model(model_id, name, 200000, "anthropic", API_ANTHROPIC, is_new=is_new, mcp=True)


def _gemini(model_id: str, name: str, window: int = 1048576, *, is_new: bool = False) -> ModelConfig:
    return _model(model_id, name, window, "gemini", API_GEMINI, is_new=is_new)


def _compatible(
    model_id: str, name: str, window: int, provider: str, base_url: str, *, is_new: bool = False
) -> ModelConfig:
    return _model(model_id, name, window, provider, API_CHAT_COMPLETIONS, base_url=base_url, is_new=is_new)


GPT5_MODELS: Tuple[ModelConfig, ...] = (
    _openai("gpt-5", "GPT-5", 400000, is_new=True, reasoning=True),
    _openai("gpt-5-mini", "GPT-5 Mini", 400000, is_new=True, reasoning=True),
    _openai("gpt-5-nano", "GPT-5 Nano", 400000, is_new=True, reasoning=True),
    _openai("gpt-5-chat-latest", "GPT-5 Chat", 400000, is_new=True, reasoning=True),
)

CLAUDE_MODELS: Tuple[ModelConfig, ...] = (
    _claude("claude-opus-4-1-20250805", "Claude Opus 4.1", is_new=True),
    _claude("claude-opus-4-20250514", "Claude Opus 4"),
    _claude("claude-sonnet-4-20250514", "Claude Sonnet 4"),
    _claude("claude-3-7-sonnet-20250219", "Claude 3.7 Sonnet"),
    _claude("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet"),
    _claude("claude-3-5-sonnet-20240620", "Claude 3.5 Sonnet (2024-06-20)"),
    _claude("claude-3-5-haiku-20241022", "Claude 3.5 Haiku"),
    _claude("claude-3-opus-20240229", "Claude 3 Opus"),
    _claude("claude-3-haiku-20240307", "Claude 3 Haiku"),
)

O_SERIES_MODELS: Tuple[ModelConfig, ...] = (
    _openai("o3-pro", "O3 Pro", 200000, reasoning=True),
    _openai("o4-mini", "O4 Mini", 200000, reasoning=True),
    _openai("o3", "O3", 200000, reasoning=True),
    _openai("o3-mini", "O3 Mini", 200000, reasoning=True),
    _openai("o1-pro", "O1 Pro", 200000, reasoning=True),
    _openai("o1", "O1", 200000, reasoning=True),
)

GPT4_MODELS: Tuple[ModelConfig, ...] = (
    _openai("gpt-4.1", "GPT-4.1", 1000000),
    _openai("gpt-4.1-mini", "GPT-4.1 Mini", 1000000),
    _openai("gpt-4.1-nano", "GPT-4.1 Nano", 1000000),
    _openai("chatgpt-4o-latest", "ChatGPT-4o", 128000),
    _openai("gpt-4o-2024-11-20", "GPT-4o (2024-11-20)", 128000),
    _openai("gpt-4o", "GPT-4o", 128000),
    _openai("gpt-4o-mini", "GPT-4o Mini", 128000),
    # search previews are not served by the responses endpoint
    _model("gpt-4o-search-preview", "GPT-4o Search Preview", 128000, "openai", API_CHAT_COMPLETIONS),
    _model("gpt-4o-mini-search-preview", "GPT-4o Mini Search Preview", 128000, "openai", API_CHAT_COMPLETIONS),
    _openai("gpt-4", "GPT-4", 8000),
    _model("codex-mini-latest", "Codex Mini", 200000, "openai", API_RESPONSES),
)

GEMINI_MODELS: Tuple[ModelConfig, ...] = (
    _gemini("gemini-2.5-pro", "Gemini 2.5 Pro"),
    _gemini("gemini-2.5-flash", "Gemini 2.5 Flash"),
    _gemini("gemini-2.5-flash-lite", "Gemini 2.5 Flash-Lite"),
    _gemini("gemini-2.5-flash-preview-05-20", "Gemini 2.5 Flash (Preview 05-20)", is_new=True),
    _gemini("gemini-2.0-flash", "Gemini 2.0 Flash"),
    _gemini("gemini-2.0-flash-lite", "Gemini 2.0 Flash-Lite"),
    _gemini("gemini-1.5-pro", "Gemini 1.5 Pro", 2097152),
    _gemini("gemini-1.5-flash", "Gemini 1.5 Flash"),
    _gemini("gemini-1.5-flash-8b", "Gemini 1.5 Flash-8B"),
)

COMPATIBLE_MODELS: Tuple[ModelConfig, ...] = (
    _compatible("grok-4", "Grok 4", 256000, "xai", XAI_DEFAULT_BASE_URL, is_new=True),
    _compatible("grok-3", "Grok 3", 131000, "xai", XAI_DEFAULT_BASE_URL),
    _compatible("grok-3-mini", "Grok 3 Mini", 131000, "xai", XAI_DEFAULT_BASE_URL),
    _compatible("deepseek-chat", "DeepSeek Chat", 128000, "deepseek", DEEPSEEK_DEFAULT_BASE_URL, is_new=True),
    _compatible("deepseek-reasoner", "DeepSeek Reasoner", 128000, "deepseek", DEEPSEEK_DEFAULT_BASE_URL, is_new=True),
    _compatible("kimi-k2-0711-preview", "Kimi K2", 128000, "moonshot", MOONSHOT_DEFAULT_BASE_URL, is_new=True),
    _compatible("openai/gpt-oss-120b", "GPT-OSS 120B", 131072, "groq", GROQ_DEFAULT_BASE_URL, is_new=True),
    _compatible("openai/gpt-oss-20b", "GPT-OSS 20B", 131072, "groq", GROQ_DEFAULT_BASE_URL, is_new=True),
    _compatible("llama-3.1-8b-instant", "Llama 3.1 8B Instant", 131072, "groq", GROQ_DEFAULT_BASE_URL),
    _compatible("llama-3.3-70b-versatile", "Llama 3.3 70B Versatile", 131072, "groq", GROQ_DEFAULT_BASE_URL, is_new=True),
    _compatible(
        "meta-llama/llama-4-maverick-17b-128e-instruct",
        "Llama 4 Maverick 17B",
        131072,
        "groq",
        GROQ_DEFAULT_BASE_URL,
        is_new=True,
    ),
    _compatible(
        "meta-llama/llama-4-scout-17b-16e-instruct",
        "Llama 4 Scout 17B",
        131072,
        "groq",
        GROQ_DEFAULT_BASE_URL,
        is_new=True,
    ),
    _compatible("moonshotai/kimi-k2-instruct", "Kimi K2 Instruct (Groq)", 131072, "groq", GROQ_DEFAULT_BASE_URL, is_new=True),
    _compatible("qwen/qwen3-32b", "Qwen 3 32B", 131072, "groq", GROQ_DEFAULT_BASE_URL),
    _compatible("compound-beta", "Compound Beta (System)", 131072, "groq", GROQ_DEFAULT_BASE_URL, is_new=True),
    _compatible("compound-beta-mini", "Compound Beta Mini (System)", 131072, "groq", GROQ_DEFAULT_BASE_URL, is_new=True),
)

BUILTIN_MODELS: Tuple[ModelConfig, ...] = (
    GPT5_MODELS + CLAUDE_MODELS + O_SERIES_MODELS + GPT4_MODELS + GEMINI_MODELS + COMPATIBLE_MODELS
)

_BY_ID: Dict[str, ModelConfig] = {m.id: m for m in BUILTIN_MODELS}


def builtin_model(model_id: str) -> Optional[ModelConfig]:
    """Return the built-in configuration for ``model_id`` (exact match)."""
    return _BY_ID.get(model_id)


__all__ = ["BUILTIN_MODELS", "builtin_model"]
