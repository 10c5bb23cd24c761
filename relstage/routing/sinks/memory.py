"""In-memory sink — keeps every event it receives, in order."""

from __future__ import annotations

import threading

from relstage.models.events import UnpackEvent, UnpackEventType


class MemorySink:
    """Records events for later inspection (CLI summaries, tests)."""

    def __init__(self) -> None:
        self._events: list[UnpackEvent] = []
        self._lock = threading.Lock()

    @property
    def sink_name(self) -> str:
        return "memory"

    def accept(self, event: UnpackEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[UnpackEvent]:
        with self._lock:
            return list(self._events)

    def of_type(self, event_type: UnpackEventType) -> list[UnpackEvent]:
        return [e for e in self.events if e.event_type is event_type]
