"""Resolved attachment payload returned by the attachment store."""
from __future__ import annotations

from dataclasses import dataclass

from .content_part import ImagePart


@dataclass(frozen=True)
class Attachment:
    mime_type: str
    data: bytes

    def to_image_part(self) -> ImagePart:
        return ImagePart.from_bytes(self.data, self.mime_type or None)


__all__ = ["Attachment"]
