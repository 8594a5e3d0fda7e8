"""Model resolution.

Looks a model id up in the built-in catalog first and then among the active
user-defined records of the external model registry. Registry records are
validated into :class:`ModelConfig`; a record that fails validation is
logged and skipped so one bad entry cannot hide the rest.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from ..base.interfaces import IModelRegistry
from ..base.logging import get_logger, log_event
from ..base.models import ModelConfig
from .builtin import BUILTIN_MODELS, builtin_model


class ModelResolver:
    """Resolve model ids against built-in and user-defined configurations."""

    def __init__(self, registry: Optional[IModelRegistry] = None, logger: Optional[logging.Logger] = None) -> None:
        self._registry = registry
        self._logger = logger or get_logger("chatter.catalog")

    def resolve(self, model_id: str) -> Optional[ModelConfig]:
        """Return the configuration for ``model_id`` or ``None``."""
        found = builtin_model(model_id)
        if found is not None:
            return found
        for config in self.custom_models():
            if config.id == model_id:
                return config
        return None

    def custom_models(self) -> List[ModelConfig]:
        """Active, valid user-defined configurations in registry order."""
        if self._registry is None:
            return []
        configs: List[ModelConfig] = []
        for record in self._registry.list_active_custom_models():
            config = self._validate(record)
            if config is not None and config.is_active:
                configs.append(config)
        return configs

    def all_models(self) -> List[ModelConfig]:
        """Built-in models followed by the active custom models."""
        return list(BUILTIN_MODELS) + self.custom_models()

    def _validate(self, record: Mapping[str, Any]) -> Optional[ModelConfig]:
        try:
            return ModelConfig.model_validate(dict(record))
        except (ValidationError, TypeError, ValueError) as exc:
            log_event(
                self._logger,
                "resolver.custom_model.invalid",
                level=logging.WARNING,
                model=record.get("modelId") or record.get("id") if isinstance(record, Mapping) else None,
                error=str(exc),
            )
            return None


__all__ = ["ModelResolver"]
