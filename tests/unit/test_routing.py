"""Unit tests for SinkDispatcher and the built-in progress sinks."""

from __future__ import annotations

import logging

import pytest

from relstage.models.events import UnpackEvent, UnpackEventType
from relstage.routing import BaseSink, LoggingSink, MemorySink, SinkDispatcher


def _event(event_type: UnpackEventType = UnpackEventType.UNPACK_STARTED) -> UnpackEvent:
    return UnpackEvent(run_id="unpack-test", event_type=event_type, message="hello")


class _FailingSink:
    @property
    def sink_name(self) -> str:
        return "failing_sink"

    def accept(self, event: UnpackEvent) -> None:
        raise RuntimeError("sink exploded")


class TestSinkDispatcher:
    def test_fans_out_to_all_sinks(self):
        first, second = MemorySink(), MemorySink()
        dispatcher = SinkDispatcher([first, second])
        event = _event()

        dispatcher.accept(event)

        assert first.events == [event]
        assert second.events == [event]

    def test_failing_sink_does_not_block_others(self, caplog: pytest.LogCaptureFixture):
        memory = MemorySink()
        dispatcher = SinkDispatcher([_FailingSink(), memory])

        with caplog.at_level(logging.ERROR):
            delivered = dispatcher.accept(_event())

        assert delivered == ["memory"]
        assert len(memory.events) == 1
        assert "sink exploded" in caplog.text

    def test_duplicate_registration_ignored(self):
        memory = MemorySink()
        dispatcher = SinkDispatcher([memory])
        dispatcher.register_sink(memory)
        assert dispatcher.registered_sinks == [memory]

    def test_unregister(self):
        memory = MemorySink()
        dispatcher = SinkDispatcher([memory])
        dispatcher.unregister_sink(memory)
        dispatcher.unregister_sink(memory)
        assert dispatcher.registered_sinks == []

    def test_builtin_sinks_satisfy_protocol(self):
        for sink in (LoggingSink(), MemorySink(), SinkDispatcher()):
            assert isinstance(sink, BaseSink)


class TestLoggingSink:
    def test_logs_info_and_error(self, caplog: pytest.LogCaptureFixture):
        sink = LoggingSink()
        with caplog.at_level(logging.INFO, logger="relstage"):
            sink.accept(_event())
            sink.accept(_event(UnpackEventType.UNPACK_FAILED))

        levels = [r.levelno for r in caplog.records]
        assert levels == [logging.INFO, logging.ERROR]
        assert "[unpack-test] hello" in caplog.text


class TestMemorySink:
    def test_of_type(self):
        sink = MemorySink()
        sink.accept(_event())
        sink.accept(_event(UnpackEventType.UNPACK_COMPLETED))
        assert len(sink.of_type(UnpackEventType.UNPACK_COMPLETED)) == 1
