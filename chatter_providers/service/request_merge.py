"""Merge a resolved model configuration into a caller request.

Caller values always win: an explicit ``base_url`` replaces the configured
one, and caller headers and body parameters override configured keys one by
one. An empty API key is filled from the provider configuration layer
(config file, environment, dotenv).
"""
from __future__ import annotations

from ..base.models import ChatRequest, ModelConfig
from ..config import get_provider_config


def merge_model_config(request: ChatRequest, config: ModelConfig) -> ChatRequest:
    """Return ``request`` enriched with the defaults of ``config``."""
    changes = {
        "base_url": request.base_url or config.base_url,
        "custom_headers": {**config.custom_headers, **(request.custom_headers or {})},
        "custom_body_params": {**config.custom_body_params, **(request.custom_body_params or {})},
    }
    if not request.api_key:
        api_key = get_provider_config(config.provider).get("api_key")
        if api_key:
            changes["api_key"] = api_key
    return request.evolve(**changes)


__all__ = ["merge_model_config"]
