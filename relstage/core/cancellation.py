"""Cancellation scope shared by the orchestrator and its workers."""

from __future__ import annotations

import threading


class CancelScope:
    """Combines an optional caller-supplied cancel event with a run-local abort flag.

    The orchestrator sets the abort flag when any artifact fails so in-flight
    downloads on other workers stop at their next chunk.  The caller's event
    is only ever read, never set.
    """

    def __init__(self, external: threading.Event | None = None) -> None:
        self._external = external
        self._abort = threading.Event()

    def is_set(self) -> bool:
        if self._abort.is_set():
            return True
        return self._external is not None and self._external.is_set()

    def set(self) -> None:
        self._abort.set()
