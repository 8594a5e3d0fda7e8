"""Event-typed stream decoder for the Responses protocol.

Every frame carries a ``type``; :class:`ResponsesStreamDecoder` routes it
through an explicit handler table. Types missing from the table are ignored,
so new server-side event kinds never break a stream.

Besides text, the decoder follows three stateful threads through a stream:

- reasoning summaries, accumulated per ``summary_index`` and re-emitted as
  one joined summary whenever a part finishes
- remote tool calls, correlated by item id in a :class:`ToolCallTracker`
- approval requests, surfaced once each with the id of the response that
  must be resumed

Some gateways still send a whole ``output`` array at the top level of a
frame. Message text found there is surfaced as text only when the same item
was not already streamed through deltas.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set

from ..base.errors import ErrorCode, build_provider_error, parse_event_typed_frame
from ..base.streaming import (
    ApprovalRequestEvent,
    CompleteEvent,
    ErrorEvent,
    ReasoningComplete,
    ReasoningDelta,
    StreamEvent,
    TextDelta,
    ToolCallStatus,
    UsageEvent,
    is_terminal,
)
from .base import FrameDecoder
from .tool_tracking import ToolCallTracker, tool_event

Handler = Callable[[Mapping[str, Any]], Iterable[StreamEvent]]

REASONING_JOINER = "\n\n"
DEFAULT_SERVER_LABEL = "MCP server"


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


class ResponsesStreamDecoder(FrameDecoder):
    def __init__(self, logger: logging.Logger, *, provider: str, model: Optional[str] = None) -> None:
        super().__init__(logger)
        self.provider = provider
        self.model = model
        self.response_id: Optional[str] = None
        self.tracker = ToolCallTracker()
        self._reasoning: Dict[int, str] = {}
        self._streamed_items: Set[str] = set()
        self._streamed_text = False
        self._legacy_seen: Set[str] = set()
        self._handlers: Dict[str, Handler] = {
            "response.created": self._on_created,
            "response.output_text.delta": self._on_text_delta,
            "response.reasoning_summary_part.added": self._on_reasoning_part,
            "response.reasoning_summary_text.delta": self._on_reasoning_delta,
            "response.reasoning_summary_text.done": self._on_reasoning_done,
            "response.mcp_call.in_progress": self._on_call_in_progress,
            "response.mcp_call_arguments.delta": self._on_arguments_delta,
            "response.mcp_call_arguments.done": self._on_arguments_done,
            "response.output_item.added": self._on_output_item,
            "response.output_item.done": self._on_output_item,
            "response.mcp_call.completed": self._on_call_completed,
            "response.mcp_call.failed": self._on_call_failed,
            "response.mcp_list_tools.failed": self._on_list_tools_failed,
            "error": self._on_error,
            "response.failed": self._on_error,
            "response.completed": self._on_completed,
        }

    # ------------------------------------------------------------- dispatch
    def on_frame(self, frame: Dict[str, Any]) -> Iterable[StreamEvent]:
        handler = self._handlers.get(frame.get("type") or "")
        events = list(handler(frame)) if handler is not None else []
        legacy = self._legacy_output(frame)
        if not legacy:
            return events
        # legacy text goes before a terminal event from the same frame
        head = [e for e in events if not is_terminal(e)]
        tail = [e for e in events if is_terminal(e)]
        return head + legacy + tail

    # ------------------------------------------------------------- handlers
    def _on_created(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        response = frame.get("response") or {}
        if response.get("id"):
            self.response_id = response["id"]
        return ()

    def _on_text_delta(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        delta = frame.get("delta")
        if not delta:
            return ()
        if frame.get("item_id"):
            self._streamed_items.add(frame["item_id"])
        self._streamed_text = True
        return (TextDelta(delta),)

    def _on_reasoning_part(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        index = frame.get("summary_index")
        if isinstance(index, int):
            self._reasoning.setdefault(index, "")
        return ()

    def _on_reasoning_delta(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        delta = frame.get("delta")
        if not delta:
            return ()
        index = self._summary_index(frame)
        self._reasoning[index] = self._reasoning.get(index, "") + delta
        return (ReasoningDelta(delta),)

    def _on_reasoning_done(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        text = frame.get("text")
        if isinstance(text, str):
            self._reasoning[self._summary_index(frame)] = text
        return (ReasoningComplete(self.joined_reasoning()),)

    def _on_call_in_progress(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        item_id = frame.get("item_id")
        if not item_id:
            return ()
        return self._emit(self.tracker.update(item_id, status=ToolCallStatus.PENDING))

    def _on_arguments_delta(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        if frame.get("item_id") and frame.get("delta"):
            self.tracker.append_arguments(frame["item_id"], frame["delta"])
        return ()

    def _on_arguments_done(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        item_id = frame.get("item_id")
        if not item_id or not isinstance(frame.get("arguments"), str):
            return ()
        return self._emit(self.tracker.update(item_id, arguments=frame["arguments"]))

    def _on_output_item(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        item = frame.get("item") or {}
        kind = item.get("type")
        if kind == "mcp_call" and item.get("id"):
            error = _as_text(item.get("error"))
            output = _as_text(item.get("output"))
            if error:
                status = ToolCallStatus.FAILED
            elif output is not None:
                status = ToolCallStatus.COMPLETED
            else:
                status = ToolCallStatus.EXECUTING
            return self._emit(
                self.tracker.update(
                    item["id"],
                    name=item.get("name"),
                    arguments=item.get("arguments"),
                    server_label=item.get("server_label"),
                    status=status,
                    result=output,
                    error=error,
                )
            )
        if kind == "mcp_approval_request" and item.get("id"):
            if not self.tracker.first_approval(item["id"]):
                return ()
            return (
                ApprovalRequestEvent(
                    id=item["id"],
                    name=item.get("name") or "",
                    arguments=item.get("arguments") or "",
                    server_label=item.get("server_label") or "",
                    response_id=self.response_id,
                ),
            )
        if kind == "mcp_list_tools":
            self.tracker.remember_server(item.get("id") or "", item.get("server_label") or "")
        return ()

    def _on_call_completed(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        item_id = frame.get("item_id")
        if not item_id or item_id not in self.tracker:
            return ()
        return self._emit(self.tracker.update(item_id, status=ToolCallStatus.COMPLETED))

    def _on_call_failed(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        item_id = frame.get("item_id")
        if not item_id or item_id not in self.tracker:
            return ()
        return self._emit(
            self.tracker.update(item_id, status=ToolCallStatus.FAILED, error=_as_text(frame.get("error")))
        )

    def _on_list_tools_failed(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        label = self.tracker.server_label(frame.get("item_id") or "") or DEFAULT_SERVER_LABEL
        message = f"Failed to load MCP tools from '{label}'. Check the server URL and authorization."
        error = build_provider_error(
            ErrorCode.NETWORK_ERROR,
            message,
            self.provider,
            original=dict(frame),
            headers={},
            model=self.model,
        )
        return (ErrorEvent(error),)

    def _on_error(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        return (ErrorEvent(parse_event_typed_frame(frame, self.provider, self.model)),)

    def _on_completed(self, frame: Mapping[str, Any]) -> Iterable[StreamEvent]:
        response = frame.get("response") or {}
        events: List[StreamEvent] = []
        usage = response.get("usage")
        if isinstance(usage, dict):
            events.append(
                UsageEvent.build(usage.get("input_tokens"), usage.get("output_tokens"), usage.get("total_tokens"))
            )
        events.append(CompleteEvent(response.get("id") or self.response_id))
        return events

    # -------------------------------------------------------------- helpers
    def joined_reasoning(self) -> str:
        """Summary parts in index order, empty parts dropped."""
        parts = (self._reasoning[i] for i in sorted(self._reasoning))
        return REASONING_JOINER.join(p for p in parts if p)

    @staticmethod
    def _summary_index(frame: Mapping[str, Any]) -> int:
        index = frame.get("summary_index")
        return index if isinstance(index, int) else 0

    @staticmethod
    def _emit(call) -> Iterable[StreamEvent]:
        return (tool_event(call),) if call is not None else ()

    def _legacy_output(self, frame: Mapping[str, Any]) -> List[StreamEvent]:
        output = frame.get("output")
        if not isinstance(output, list):
            return []
        events: List[StreamEvent] = []
        for item in output:
            if not isinstance(item, dict) or item.get("type") != "message":
                continue
            texts = [
                c["text"]
                for c in item.get("content") or []
                if isinstance(c, dict) and c.get("type") == "output_text" and c.get("text")
            ]
            if not texts:
                continue
            item_id = item.get("id")
            if item_id:
                if item_id in self._streamed_items or item_id in self._legacy_seen:
                    continue
                key = item_id
            else:
                if self._streamed_text:
                    continue
                key = "\x00" + "".join(texts)
                if key in self._legacy_seen:
                    continue
            self._legacy_seen.add(key)
            events.extend(TextDelta(t) for t in texts)
        return events


__all__ = ["ResponsesStreamDecoder"]
