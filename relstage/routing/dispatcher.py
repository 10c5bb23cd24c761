"""SinkDispatcher — fans progress events out to every configured sink.

A failure in one sink is logged and does not prevent delivery to the
remaining sinks.  Progress reporting never aborts an unpack run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from relstage.models.events import UnpackEvent

if TYPE_CHECKING:
    from relstage.routing.sinks import BaseSink

logger = logging.getLogger(__name__)


class SinkDispatcher:
    """Routes events to ALL registered sinks, in registration order.

    A dispatcher is itself a sink, so it can be handed to the orchestrator
    wherever a single sink is expected.

    Usage
    -----
    >>> dispatcher = SinkDispatcher([LoggingSink()])
    >>> dispatcher.register_sink(memory_sink)
    >>> dispatcher.accept(event)
    """

    def __init__(self, sinks: list[BaseSink] | None = None) -> None:
        self._sinks: list[BaseSink] = []
        for sink in sinks or []:
            self.register_sink(sink)

    @property
    def sink_name(self) -> str:
        return "dispatcher"

    def register_sink(self, sink: BaseSink) -> None:
        """Register a sink.  Registering the same instance twice is a no-op."""
        if sink not in self._sinks:
            self._sinks.append(sink)
            logger.debug("Registered sink: %s", sink.sink_name)

    def unregister_sink(self, sink: BaseSink) -> None:
        """Remove a previously registered sink."""
        if sink in self._sinks:
            self._sinks.remove(sink)
            logger.debug("Unregistered sink: %s", sink.sink_name)

    @property
    def registered_sinks(self) -> list[BaseSink]:
        """Return a copy of the registered sink list."""
        return list(self._sinks)

    def accept(self, event: UnpackEvent) -> list[str]:
        """Deliver *event* to every sink.

        Returns the names of the sinks that accepted the event.
        """
        succeeded: list[str] = []
        for sink in self._sinks:
            try:
                sink.accept(event)
                succeeded.append(sink.sink_name)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Sink %s failed for event %s: %s",
                    sink.sink_name,
                    event.event_id,
                    exc,
                )
        return succeeded
