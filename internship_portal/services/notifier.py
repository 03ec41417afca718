"""
Notifier - best-effort fan-out of change hints to connected browsers.

Events are delivered at most once to whoever is connected right now.
There is no replay or acknowledgement: clients treat an event as "your
cached view is stale" and re-fetch over REST. Payloads carry ids and
statuses only.
"""

from typing import Set

import structlog
from fastapi import WebSocket

logger = structlog.get_logger(__name__)

NEW_INTERNSHIP = "newInternship"
UPDATED_INTERNSHIP = "updatedInternship"
NEW_APPLICATION = "newApplication"
UPDATED_APPLICATION = "updatedApplication"
EMPLOYER_APPROVED = "employerApproved"


class Notifier:
    """Tracks live WebSocket listeners and broadcasts events to them."""

    def __init__(self):
        self.listeners: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.listeners.add(websocket)
        logger.debug("listener_connected", listeners=len(self.listeners))

    def disconnect(self, websocket: WebSocket) -> None:
        self.listeners.discard(websocket)
        logger.debug("listener_disconnected", listeners=len(self.listeners))

    async def publish(self, event: str, data: dict) -> int:
        """
        Send {"event": ..., "data": ...} to every listener.

        A listener whose send fails is dropped. Returns how many sends
        succeeded.
        """
        message = {"event": event, "data": data}
        delivered = 0
        for websocket in list(self.listeners):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.info("listener_dropped", event_name=event, error=str(e))
                self.disconnect(websocket)
        return delivered


# Singleton
_notifier: Notifier = None


def get_notifier() -> Notifier:
    """Get or create notifier singleton."""
    global _notifier
    if _notifier is None:
        _notifier = Notifier()
    return _notifier


async def notify(event: str, data: dict) -> int:
    """Publish from a request handler. A broadcast failure never fails the request."""
    try:
        return await get_notifier().publish(event, data)
    except Exception as e:
        logger.warning("broadcast_failed", event_name=event, error=str(e))
        return 0
