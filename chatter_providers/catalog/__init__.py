"""Model catalog: built-in configurations and id resolution."""
from __future__ import annotations

from .builtin import BUILTIN_MODELS, builtin_model
from .resolution import ModelResolver

__all__ = ["BUILTIN_MODELS", "ModelResolver", "builtin_model"]
