"""Logging event sink adapter."""

from typing import Optional

from autofinder.application.ports.event_sink import EventKind, EventSink
from autofinder.infrastructure.logging.logger import log_event


class LoggingEventSink(EventSink):
    """Writes every event as a structured log line."""

    def record(
        self,
        event_kind: EventKind,
        subject_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        """Log the event."""
        log_event(
            component="telemetry",
            event_kind=event_kind.value,
            subject_id=subject_id,
            note=note,
        )
