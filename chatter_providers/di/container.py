"""Composition root for the chat service.

Builds an :class:`AIService` from explicit collaborators. There is no
module-level singleton: every call returns a fresh service, and callers that
want one shared instance keep it themselves.

Missing collaborators fall back to empty in-memory implementations, so
``build_service()`` with no arguments serves the built-in catalog without
remote tools or attachments.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

from ..adapters import default_adapters
from ..base.interfaces import IAttachmentStore, IModelRegistry, IToolServerRegistry
from ..catalog import ModelResolver
from ..registries import InMemoryAttachmentStore, InMemoryModelRegistry, InMemoryToolServerRegistry
from ..service import AIService


def build_service(
    model_registry: Optional[IModelRegistry] = None,
    tool_servers: Optional[IToolServerRegistry] = None,
    attachments: Optional[IAttachmentStore] = None,
    *,
    http_client: Optional[httpx.Client] = None,
    sleep: Optional[Callable[[float], None]] = None,
    gemini_client_factory: Optional[Callable[..., Any]] = None,
) -> AIService:
    """Wire resolver, adapters and service together.

    Args:
        model_registry: Source of user-defined models.
        tool_servers: Source of enabled remote tool servers.
        attachments: Attachment store used to inline images.
        http_client: Shared ``httpx.Client``; defaults to the pooled clients.
        sleep: Backoff sleep override (tests).
        gemini_client_factory: SDK client factory override (tests).
    """
    resolver = ModelResolver(model_registry or InMemoryModelRegistry())
    adapters = default_adapters(
        http_client=http_client,
        attachments=attachments or InMemoryAttachmentStore(),
        tool_servers=tool_servers or InMemoryToolServerRegistry(),
        gemini_client_factory=gemini_client_factory,
    )
    return AIService(resolver, adapters, sleep=sleep)


__all__ = ["build_service"]
