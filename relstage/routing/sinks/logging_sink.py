"""Logging sink — writes each progress event to a stdlib logger."""

from __future__ import annotations

import logging

from relstage.models.events import UnpackEvent, UnpackEventType

logger = logging.getLogger(__name__)


class LoggingSink:
    """Reports events through ``logging``; failures are logged at ERROR.

    Parameters
    ----------
    log:
        Logger to write to.  Defaults to this module's logger.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    @property
    def sink_name(self) -> str:
        return "logging"

    def accept(self, event: UnpackEvent) -> None:
        level = logging.ERROR if event.event_type is UnpackEventType.UNPACK_FAILED else logging.INFO
        self._log.log(level, "[%s] %s", event.run_id, event.message)
