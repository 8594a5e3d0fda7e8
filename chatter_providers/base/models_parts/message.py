"""
Message DTO used by every adapter.

Defines the `Message` dataclass and the `Role` literal. Content is either a
plain string or a list of `ContentPart` objects.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Union

from .content_part import ContentPart, ImagePart, TextPart


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    """A role-tagged chat message.

    Attributes:
        role: ``"system"``, ``"user"`` or ``"assistant"``.
        content: Plain text or a list of text/image parts.
    """

    role: Role
    content: Union[str, List[ContentPart]]

    def is_structured(self) -> bool:
        """Return True if the message content is a list of parts."""
        return isinstance(self.content, list)

    def parts(self) -> List[ContentPart]:
        """Return the content as a list of parts (strings become one text part)."""
        if isinstance(self.content, str):
            return [TextPart(self.content)] if self.content else []
        return list(self.content)

    def text_or_joined(self) -> str:
        """Return the text content; parts are joined with newlines, images skipped."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(p.text for p in self.content if isinstance(p, TextPart))

    def with_images(self, images: List[ImagePart]) -> "Message":
        """Return a copy with ``images`` appended as parts."""
        if not images:
            return self
        return Message(role=self.role, content=self.parts() + list(images))


__all__ = [
    "Message",
    "Role",
]
