"""
In-process event bus — synchronous publish/subscribe between components.

Handlers run inside ``publish`` one after another. A handler that raises is
logged and skipped; the remaining handlers still run and the publisher never
sees the error. When diagnostics are on, every published event is recorded
in a bounded drop-oldest buffer.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Any, Callable, TypedDict

log = logging.getLogger(__name__)

Handler = Callable[[Any], None]

DIAGNOSTIC_CAPACITY = 300

# Well-known event names
PERSONALITY_UPDATED = "personality:updated"
RELATIONSHIP_STAGE_CHANGED = "relationship:stageChanged"


class DiagnosticRecord(TypedDict):
    """One recorded publish."""
    timestamp: int      # milliseconds since epoch
    event: str
    payload: Any


class EventBus:
    """
    Synchronous many-to-many dispatcher.

    Construct one instance per application and pass it to the components
    that need it. Subscriptions live until their disposer (or ``unsubscribe``)
    removes them.
    """

    def __init__(
        self,
        diagnostics: bool = False,
        capacity: int = DIAGNOSTIC_CAPACITY,
    ) -> None:
        self._listeners: dict[str, set[Handler]] = {}
        self._diagnostics = diagnostics
        self._buffer: deque[DiagnosticRecord] = deque(maxlen=max(1, capacity))

    # ── subscriptions ────────────────────────────────────────────────

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        """Register *handler* for *event*. Returns an idempotent disposer."""
        self._listeners.setdefault(event, set()).add(handler)

        def dispose() -> None:
            self.unsubscribe(event, handler)

        return dispose

    def subscribe_once(self, event: str, handler: Handler) -> Callable[[], None]:
        """Register *handler* so it fires at most once."""

        def wrapper(payload: Any) -> None:
            self.unsubscribe(event, wrapper)
            try:
                handler(payload)
            except Exception:
                log.exception("One-shot handler failed for event %r", event)

        return self.subscribe(event, wrapper)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        """Remove one registration. Unknown pairs are ignored."""
        handlers = self._listeners.get(event)
        if handlers is None:
            return
        handlers.discard(handler)
        if not handlers:
            del self._listeners[event]

    def has_subscribers(self, event: str) -> bool:
        return event in self._listeners

    # ── dispatch ─────────────────────────────────────────────────────

    def publish(self, event: str, payload: Any = None) -> None:
        """Invoke every handler currently registered for *event*."""
        if self._diagnostics:
            self._buffer.append({
                "timestamp": int(time.time() * 1000),
                "event": event,
                "payload": payload,
            })

        handlers = self._listeners.get(event)
        if not handlers:
            return

        # Snapshot: handlers added or removed during dispatch wait for the next publish
        for handler in list(handlers):
            try:
                handler(payload)
            except Exception:
                log.exception("Event handler error for %r", event)

    # ── diagnostics ──────────────────────────────────────────────────

    def set_diagnostics(self, enabled: bool) -> None:
        """Toggle recording. Existing records are kept."""
        self._diagnostics = bool(enabled)

    @property
    def diagnostics_enabled(self) -> bool:
        return self._diagnostics

    def get_diagnostics(self) -> list[DiagnosticRecord]:
        """Copy of the recorded events, oldest first."""
        return [DiagnosticRecord(**record) for record in self._buffer]
