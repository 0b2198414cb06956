"""HTTP event sink adapter."""

import asyncio
from typing import Optional
from uuid import uuid4

import httpx

from autofinder.application.ports.event_sink import EventKind, EventSink
from autofinder.infrastructure.logging.logger import logger

BEHAVIOR_TRACK_ENDPOINT = "/api/behavior/track"

# Events without a car are sent with this placeholder id.
NO_SUBJECT_ID = -1


class HttpEventSink(EventSink):
    """Posts events to the behavior tracking endpoint as background tasks."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize HTTP event sink.

        Args:
            base_url: API base URL
            timeout_seconds: Request timeout
            client: Preconfigured client, mainly for tests
        """
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)
        self._session_id = str(uuid4())
        self._pending: set[asyncio.Task] = set()

    def record(
        self,
        event_kind: EventKind,
        subject_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        """
        Schedule the event upload on the running loop.

        Events recorded outside a running loop are dropped.
        """
        payload = {
            "carId": subject_id if subject_id is not None else NO_SUBJECT_ID,
            "actionType": event_kind.value,
            "value": note,
            "sessionId": self._session_id,
        }
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"Dropping {event_kind.value} event: no running event loop")
            return

        task = loop.create_task(self._send(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, payload: dict) -> None:
        try:
            response = await self._client.post(BEHAVIOR_TRACK_ENDPOINT, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Error sending {payload['actionType']} event: {str(e)}")

    async def flush(self) -> None:
        """Wait for every scheduled upload."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def close(self) -> None:
        """Flush pending uploads and close the HTTP client."""
        await self.flush()
        await self._client.aclose()
