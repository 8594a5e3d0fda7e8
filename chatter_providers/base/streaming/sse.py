"""Incremental server-sent events decoder.

Network reads split the byte stream at arbitrary points, including inside a
line or inside a multi-byte UTF-8 character. :class:`SSEDecoder` buffers the
unterminated tail between reads so that feeding a stream in any number of
pieces yields exactly the same payloads as feeding it in one piece.

Only ``data:`` fields are surfaced; comments (``:``), ``event:``, ``id:`` and
``retry:`` lines are ignored because every supported backend repeats the
event name inside the JSON payload.
"""
from __future__ import annotations

import codecs
from typing import List

_DATA_FIELD = "data:"


class SSEDecoder:
    """Turn byte chunks into complete ``data:`` payload strings."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> List[str]:
        """Consume ``chunk`` and return the payloads of every completed line."""
        self._buffer += self._decoder.decode(chunk)
        if "\n" not in self._buffer:
            return []
        *lines, self._buffer = self._buffer.split("\n")
        return [p for p in (self._payload(line) for line in lines) if p is not None]

    def flush(self) -> List[str]:
        """Return the payload of a trailing line left unterminated at EOF."""
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        payload = self._payload(tail)
        return [payload] if payload is not None else []

    @staticmethod
    def _payload(line: str) -> str | None:
        line = line.rstrip("\r")
        if not line.startswith(_DATA_FIELD):
            return None
        value = line[len(_DATA_FIELD):]
        if value.startswith(" "):
            value = value[1:]
        return value if value.strip() else None


def iter_sse_payloads(chunks) -> List[str]:
    """Decode an iterable of byte chunks in one go (test and replay helper)."""
    decoder = SSEDecoder()
    out: List[str] = []
    for chunk in chunks:
        out.extend(decoder.feed(chunk))
    out.extend(decoder.flush())
    return out


__all__ = ["SSEDecoder", "iter_sse_payloads"]
