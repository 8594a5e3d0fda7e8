"""IAttachmentStore Protocol (single-class module).

Read-only lookup that turns attachment references into inline image bytes.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable

from ..models import Attachment


@runtime_checkable
class IAttachmentStore(Protocol):
    """Resolve attachment ids to their stored payloads.

    Implementations return attachments in the order requested and skip ids
    they do not know. They are called from inside a streaming decode loop and
    must not block other concurrent requests.
    """

    def resolve(self, ids: Sequence[str]) -> List[Attachment]:
        ...


__all__ = ["IAttachmentStore"]
