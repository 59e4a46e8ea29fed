"""Settlement trace capture - separate from promise state.

A Trace records what happened while promises settled: which promise was
resolved or rejected, which observers ran, and how long each settlement
took. It never participates in the state machine itself.
Tree relationships are reconstructed only on demand via as_tree().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Evidence:
    """A single settlement event captured at runtime.

    Attributes:
        action: What happened (e.g. "resolve", "observer", "done")
        id: Sequential event id within the owning trace
        parent_id: Id of the enclosing event, if any
        timestamp: When the event was recorded
        info: Additional context (promise label, callback index, error)
        duration_ms: Settlement duration, recorded on completion events
    """

    action: str = ""
    id: int = field(default=0)
    parent_id: int | None = field(default=None)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    info: dict[str, Any] = field(default_factory=dict)
    duration_ms: float | None = field(default=None)


class Trace:
    """Runtime trace context for capturing settlement events.

    Uses stack-based nesting via push/pop so observer events are children
    of the settlement that triggered them. A promise settled from inside
    another promise's observer nests one level deeper.

    Performance guarantees:
    - Trace disabled -> single None check overhead
    - Evidence append is O(1)
    - No recursive tree construction during settlement
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._events: list[Evidence] = []
        self._next_id: int = 0
        self._stack: list[int] = []

    def push(self, event_id: int) -> None:
        """Make event_id the implicit parent of subsequent records."""
        self._stack.append(event_id)

    def pop(self) -> int | None:
        """Pop the current parent.

        Returns:
            The event ID that was on top of stack, or None if stack is empty
        """
        if self._stack:
            return self._stack.pop()
        return None

    def record(
        self,
        action: str,
        info: dict[str, Any] | None = None,
        parent_id: int | None = None,
        duration_ms: float | None = None,
    ) -> int | None:
        """Record an evidence event.

        Args:
            action: What happened (e.g., "resolve", "reject", "observer")
            info: Additional context
            parent_id: Explicit parent event ID for tree relationships
            duration_ms: Execution duration

        Returns:
            Event ID for linking child events, or None if tracing disabled
        """
        if not self.enabled:
            return None

        if parent_id is not None:
            effective_parent = parent_id
        elif self._stack:
            effective_parent = self._stack[-1]
        else:
            effective_parent = None

        event_id = self._next_id
        self._next_id += 1

        self._events.append(
            Evidence(
                action=action,
                id=event_id,
                parent_id=effective_parent,
                timestamp=datetime.now(UTC),
                info=info or {},
                duration_ms=duration_ms,
            )
        )

        return event_id

    def get_events(self) -> list[Evidence]:
        """Get all recorded events in recording order."""
        return list(self._events)

    def find_all(self, action: str | None = None, **info: Any) -> list[Evidence]:
        """Find recorded events by action and info fields.

        Example:
            >>> trace.find_all("observer", promise="order")
        """
        return [
            ev
            for ev in self._events
            if (action is None or ev.action == action)
            and all(ev.info.get(k) == v for k, v in info.items())
        ]

    def as_tree(self) -> dict[int | None, list[int]]:
        """Reconstruct parent-child relationships for visualization.

        Returns:
            Dict mapping parent_id to list of child_ids
        """
        tree: dict[int | None, list[int]] = {}
        for ev in self._events:
            tree.setdefault(ev.parent_id, []).append(ev.id)
        return tree

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        """Clear all events (for reuse)."""
        self._events.clear()
        self._next_id = 0
        self._stack.clear()
