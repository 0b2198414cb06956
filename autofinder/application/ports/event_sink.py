"""Telemetry event sink port."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class EventKind(str, Enum):
    """Tracked user actions."""

    SEARCH = "SEARCH"
    DETAIL_VIEW = "DETAIL_VIEW"


class EventSink(ABC):
    """Port interface for fire-and-forget telemetry."""

    @abstractmethod
    def record(
        self,
        event_kind: EventKind,
        subject_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        """
        Record an event. Must not block the caller.

        Args:
            event_kind: Kind of event
            subject_id: Car identifier, if the event concerns one car
            note: Free-form detail (e.g., "20 results")
        """
        pass

    async def close(self) -> None:
        """Deliver pending events and release resources."""
        pass
