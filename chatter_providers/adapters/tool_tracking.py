"""Per-stream correlation of tool calls and approval requests.

Providers announce one tool invocation through several wire events (an
in-progress marker, item added/done, argument deltas, a completion). The
:class:`ToolCallTracker` folds all of them into one :class:`ToolCall` record
per provider-issued id and reports a snapshot only when the record actually
changed.

Status never moves backwards: pending < executing < completed/failed. A late
or duplicated lower-rank event still contributes its other fields (name,
arguments, server label) but leaves the status alone. Once a call is final
its outcome is fixed: a completed call only takes a missing ``result`` and a
failed call only a missing ``error``.

A tracker lives for exactly one adapter invocation and is discarded with it.
"""
from __future__ import annotations

from typing import Dict, Optional, Set

from ..base.streaming import ToolCall, ToolCallEvent, ToolCallStatus, ToolResultEvent


class ToolCallTracker:
    def __init__(self) -> None:
        self._calls: Dict[str, ToolCall] = {}
        self._argument_buffers: Dict[str, str] = {}
        self._approvals: Set[str] = set()
        self._server_labels: Dict[str, str] = {}

    def get(self, call_id: str) -> Optional[ToolCall]:
        return self._calls.get(call_id)

    def __contains__(self, call_id: object) -> bool:
        return call_id in self._calls

    def update(
        self,
        call_id: str,
        *,
        name: Optional[str] = None,
        arguments: Optional[str] = None,
        server_label: Optional[str] = None,
        status: Optional[ToolCallStatus] = None,
        result: Optional[str] = None,
        error: Optional[str] = None,
    ) -> Optional[ToolCall]:
        """Merge fields into the record for ``call_id``.

        Returns the new snapshot when the record was created or changed,
        otherwise ``None``.
        """
        created = call_id not in self._calls
        current = self._calls.get(call_id) or ToolCall(id=call_id, arguments=self.buffered_arguments(call_id))
        changes: Dict[str, object] = {}
        for field_name, value in (
            ("name", name),
            ("arguments", arguments),
            ("server_label", server_label),
        ):
            if value and value != getattr(current, field_name):
                changes[field_name] = value
        if status is not None and not current.status.is_final and status.rank > current.status.rank:
            changes["status"] = status
        target = changes.get("status", current.status)
        if result is not None and result != current.result and self._accepts(current, target, "result"):
            changes["result"] = result
        if error is not None and error != current.error and self._accepts(current, target, "error"):
            changes["error"] = error
        if not changes and not created:
            return None
        updated = current.evolve(**changes) if changes else current
        self._calls[call_id] = updated
        return updated

    @staticmethod
    def _accepts(current: ToolCall, target: ToolCallStatus, field_name: str) -> bool:
        """Outcome fields of a final call are filled once and must match its status."""
        if not target.is_final:
            return True
        if field_name != ("result" if target is ToolCallStatus.COMPLETED else "error"):
            return False
        return not current.status.is_final or getattr(current, field_name) is None

    def append_arguments(self, call_id: str, delta: str) -> None:
        """Accumulate a streamed argument fragment without emitting."""
        buf = self._argument_buffers.get(call_id, "") + (delta or "")
        self._argument_buffers[call_id] = buf
        if call_id in self._calls:
            self._calls[call_id] = self._calls[call_id].evolve(arguments=buf)

    def buffered_arguments(self, call_id: str) -> str:
        return self._argument_buffers.get(call_id, "")

    def first_approval(self, approval_id: str) -> bool:
        """Return True the first time ``approval_id`` is seen."""
        if approval_id in self._approvals:
            return False
        self._approvals.add(approval_id)
        return True

    def remember_server(self, item_id: str, label: str) -> None:
        if item_id and label:
            self._server_labels[item_id] = label

    def server_label(self, item_id: str) -> str:
        return self._server_labels.get(item_id, "")


def tool_event(call: ToolCall) -> ToolCallEvent | ToolResultEvent:
    """Wrap a snapshot in the event matching its lifecycle stage."""
    if call.status.is_final:
        return ToolResultEvent(call)
    return ToolCallEvent(call)


__all__ = ["ToolCallTracker", "tool_event"]
