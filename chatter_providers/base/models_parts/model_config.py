"""
Model configuration DTO.

Purpose
-------
Describe how to reach one model: which adapter speaks its protocol
(``api_type``), the endpoint, default headers/body parameters and capability
flags. Built-in entries are constructed in code; user-defined entries arrive
from the external model registry as camelCase records (``modelId``,
``apiType``, ``baseUrl`` ...) and are validated into the same type.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and alias handling.

Notes
-----
- Instances are frozen. The resolver never mutates either source.
- Registry records carry both a storage ``id`` and the ``modelId`` used on the
  wire; ``modelId`` wins when both are present.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ModelConfig(BaseModel):
    """Configuration needed to build a request for one model."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: str = Field(validation_alias=AliasChoices("modelId", "id"))
    name: str = ""
    context_window: int = 0
    provider: str = "custom"
    api_type: str
    base_url: Optional[str] = None
    custom_headers: Dict[str, str] = Field(default_factory=dict)
    custom_body_params: Dict[str, Any] = Field(default_factory=dict)
    supports_vision: bool = False
    supports_streaming: bool = True
    supports_system_role: bool = True
    supported_parameters: Tuple[str, ...] = ()
    supports_reasoning_effort: bool = False
    supports_mcp: bool = False
    is_active: bool = True
    is_new: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.id


__all__ = ["ModelConfig"]
