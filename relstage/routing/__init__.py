"""Progress event routing for unpack runs."""

from relstage.routing.dispatcher import SinkDispatcher
from relstage.routing.sinks import BaseSink
from relstage.routing.sinks.logging_sink import LoggingSink
from relstage.routing.sinks.memory import MemorySink

__all__ = ["BaseSink", "SinkDispatcher", "LoggingSink", "MemorySink"]
