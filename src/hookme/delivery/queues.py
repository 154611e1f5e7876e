"""
Module: queues.py
Description: In-memory queues feeding the delivery loops.

Key Components:
- EmitQueue: FIFO of events awaiting their first attempt
- RetrySet: Events that failed at least once, keyed by id
"""

from collections import deque
from typing import Deque, Dict, List, Optional

from hookme.models.event import WebhookEvent
from hookme.utils.logger import get_logger

logger = get_logger(__name__)


class EmitQueue:
    """Append at the tail, pop from the head."""

    def __init__(self):
        self._events: Deque[WebhookEvent] = deque()

    def append(self, event: WebhookEvent) -> None:
        self._events.append(event)

    def popleft(self) -> Optional[WebhookEvent]:
        """Remove and return the head, or None when empty."""
        if not self._events:
            return None
        return self._events.popleft()

    def ids(self) -> List[str]:
        return [event.id for event in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)


class RetrySet:
    """
    Events awaiting redelivery.

    Insertion is idempotent: adding an id already present keeps the
    existing record and returns False.
    """

    def __init__(self):
        self._events: Dict[str, WebhookEvent] = {}

    def add(self, event: WebhookEvent) -> bool:
        """Insert event. Returns True only if the id was not present."""
        if event.id in self._events:
            logger.debug("Event already awaiting retry", event_id=event.id)
            return False
        self._events[event.id] = event
        return True

    def remove(self, event_id: str) -> bool:
        """Remove event_id. Returns True if it was present."""
        return self._events.pop(event_id, None) is not None

    def get(self, event_id: str) -> Optional[WebhookEvent]:
        return self._events.get(event_id)

    def snapshot(self) -> List[WebhookEvent]:
        """Copy of the current entries in insertion order."""
        return list(self._events.values())

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    def __len__(self) -> int:
        return len(self._events)
