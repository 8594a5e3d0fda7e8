"""In-memory collaborator implementations.

Dictionary and list backed stand-ins for the model registry, tool-server
registry and attachment store. Used by tests and by embedders that keep
their configuration in process.
"""
from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..base.models import Attachment, ToolServer


class InMemoryModelRegistry:
    """User-defined model records keyed by ``modelId``."""

    def __init__(self, records: Optional[Iterable[Mapping[str, Any]]] = None) -> None:
        self._lock = threading.Lock()
        self._records: List[Dict[str, Any]] = [dict(r) for r in records or ()]

    def add(self, record: Mapping[str, Any]) -> None:
        with self._lock:
            self._records.append(dict(record))

    def list_active_custom_models(self) -> List[Mapping[str, Any]]:
        with self._lock:
            return [dict(r) for r in self._records if r.get("isActive", r.get("is_active", True))]


class InMemoryToolServerRegistry:
    """Tool servers with an enabled flag per label."""

    def __init__(self, servers: Optional[Iterable[ToolServer]] = None) -> None:
        self._lock = threading.Lock()
        self._servers: Dict[str, ToolServer] = {}
        self._enabled: Dict[str, bool] = {}
        for server in servers or ():
            self.add(server)

    def add(self, server: ToolServer, *, enabled: bool = True) -> None:
        with self._lock:
            self._servers[server.label] = server
            self._enabled[server.label] = enabled

    def set_enabled(self, label: str, enabled: bool) -> None:
        with self._lock:
            if label in self._servers:
                self._enabled[label] = enabled

    def list_active_servers(self) -> List[ToolServer]:
        with self._lock:
            return [s for label, s in self._servers.items() if self._enabled.get(label)]


class InMemoryAttachmentStore:
    """Attachment payloads keyed by id."""

    def __init__(self, attachments: Optional[Mapping[str, Attachment]] = None) -> None:
        self._lock = threading.Lock()
        self._items: Dict[str, Attachment] = dict(attachments or {})

    def put(self, attachment_id: str, mime_type: str, data: bytes) -> None:
        with self._lock:
            self._items[attachment_id] = Attachment(mime_type=mime_type, data=data)

    def resolve(self, ids: Sequence[str]) -> List[Attachment]:
        with self._lock:
            return [self._items[i] for i in ids if i in self._items and self._items[i].data]


__all__ = ["InMemoryModelRegistry", "InMemoryToolServerRegistry", "InMemoryAttachmentStore"]
