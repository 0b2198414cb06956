"""No-op event sink adapter for when telemetry is disabled."""

from typing import Optional

from autofinder.application.ports.event_sink import EventKind, EventSink


class NoOpEventSink(EventSink):
    """No-op adapter that drops every event."""

    def record(
        self,
        event_kind: EventKind,
        subject_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        """
        No-op (does nothing).

        Args:
            event_kind: Kind of event (ignored)
            subject_id: Car identifier (ignored)
            note: Free-form detail (ignored)
        """
        pass
