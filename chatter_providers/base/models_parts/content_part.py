"""
Structured message content parts.

A message body is either plain text or a list of parts. Two part kinds are
supported: :class:`TextPart` and :class:`ImagePart`. Image data is carried as
base64 (optionally already wrapped in a ``data:`` URI) and inlined by each
adapter in its own wire shape.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from ..constants import DEFAULT_IMAGE_MIME_TYPE


@dataclass(frozen=True)
class TextPart:
    text: str
    type: Literal["text"] = "text"


@dataclass(frozen=True)
class ImagePart:
    """Inline image content.

    Attributes:
        data: Base64 payload or a complete ``data:<mime>;base64,<payload>`` URI.
        mime_type: Media type; defaults to JPEG when the source did not say.
    """

    data: str
    mime_type: Optional[str] = None
    type: Literal["image"] = "image"

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: Optional[str] = None) -> "ImagePart":
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)

    def media_type_and_payload(self) -> Tuple[str, str]:
        """Return ``(mime_type, base64_payload)`` with any URI prefix removed."""
        if self.data.startswith("data:") and "," in self.data:
            header, payload = self.data.split(",", 1)
            mime = header[5:].split(";", 1)[0] or self.mime_type or DEFAULT_IMAGE_MIME_TYPE
            return mime, payload
        return self.mime_type or DEFAULT_IMAGE_MIME_TYPE, self.data

    def data_uri(self) -> str:
        """Return the image as a ``data:`` URI."""
        if self.data.startswith("data:"):
            return self.data
        mime, payload = self.media_type_and_payload()
        return f"data:{mime};base64,{payload}"


ContentPart = Union[TextPart, ImagePart]

__all__ = ["TextPart", "ImagePart", "ContentPart"]
