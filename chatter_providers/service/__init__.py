"""Caller-facing orchestration service."""
from __future__ import annotations

from .ai_service import AIService
from .request_merge import merge_model_config

__all__ = ["AIService", "merge_model_config"]
