"""Sink protocol for unpack progress events.

All sinks implement the ``BaseSink`` protocol: a ``sink_name`` property
and an ``accept(event)`` method.  The dispatcher calls ``accept`` on every
registered sink for every event the orchestrator reports.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from relstage.models.events import UnpackEvent


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every progress sink must implement.

    Attributes
    ----------
    sink_name : str
        A unique human-readable identifier for this sink instance
        (e.g. ``"logging"``, ``"memory"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the unique name of this sink."""
        ...

    def accept(self, event: UnpackEvent) -> None:
        """Accept and process an event.

        Parameters
        ----------
        event:
            The progress event to process.
        """
        ...
