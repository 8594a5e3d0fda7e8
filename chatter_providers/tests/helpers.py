"""Shared helpers for adapter and service tests.

Builds SSE byte streams, splits them at awkward offsets and wires adapters
to ``httpx.MockTransport`` handlers that record every outbound request.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

import httpx

from chatter_providers.base.errors import classify_failure


def sse(*frames: Any, done: bool = False) -> bytes:
    """Encode ``frames`` (dicts or raw strings) as an SSE body."""
    lines = []
    for frame in frames:
        payload = frame if isinstance(frame, str) else json.dumps(frame, ensure_ascii=False)
        lines.append(f"data: {payload}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def split_every(data: bytes, size: int) -> List[bytes]:
    """Split ``data`` into ``size``-byte pieces (the last may be shorter)."""
    return [data[i : i + size] for i in range(0, len(data), size)]


@dataclass
class Recorder:
    """MockTransport handler replaying queued responses and recording requests."""

    responses: List[Callable[[], httpx.Response]] = field(default_factory=list)
    requests: List[httpx.Request] = field(default_factory=list)

    def queue_stream(
        self,
        chunks: Iterable[bytes],
        status: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        on_read: Optional[Callable[[int], None]] = None,
    ) -> "Recorder":
        chunk_list = list(chunks)

        def _make() -> httpx.Response:
            def _body() -> Iterator[bytes]:
                for idx, chunk in enumerate(chunk_list):
                    if on_read is not None:
                        on_read(idx)
                    yield chunk

            return httpx.Response(
                status,
                headers={"content-type": "text/event-stream", **dict(headers or {})},
                content=_body(),
            )

        self.responses.append(_make)
        return self

    def queue_json(self, body: Any, status: int = 200, headers: Optional[Mapping[str, str]] = None) -> "Recorder":
        self.responses.append(lambda: httpx.Response(status, json=body, headers=dict(headers or {})))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request to {request.url}")
        return self.responses.pop(0)()

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    def body(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


class ScriptedAdapter:
    """Protocol adapter double replaying one scripted outcome per invocation.

    Each stream script is a list of events, optionally ending with an
    exception instance that is raised after the events. Completion scripts
    are either a ``ChatResponse`` or an exception to raise.
    """

    provider_name = "Scripted"

    def __init__(self, api_type: str, streams=(), completions=()) -> None:
        self.api_type = api_type
        self.streams = list(streams)
        self.completions = list(completions)
        self.requests: List[Any] = []
        self.closed = 0

    def stream(self, request):
        self.requests.append(request)
        script = self.streams.pop(0)
        try:
            for item in script:
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            self.closed += 1

    def complete(self, request):
        self.requests.append(request)
        outcome = self.completions.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def format_error(self, exc, request):
        return classify_failure(exc, self.provider_name, model=request.model)
