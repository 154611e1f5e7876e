"""
Module: memory.py
Description: In-memory event store.

Does not survive process restarts; intended for tests and
short-lived scripts.
"""

from typing import Dict, Optional

from hookme.models.event import WebhookEvent
from hookme.storage.base import EventStore


class MemoryStore(EventStore):
    """Dict-backed store."""

    def __init__(self):
        self._events: Dict[str, WebhookEvent] = {}

    def set(self, event_id: str, event: WebhookEvent) -> None:
        self._events[event_id] = event

    def get(self, event_id: str) -> Optional[WebhookEvent]:
        return self._events.get(event_id)

    def delete(self, event_id: str) -> None:
        self._events.pop(event_id, None)

    def has(self, event_id: str) -> bool:
        return event_id in self._events

    def get_all(self) -> Dict[str, WebhookEvent]:
        return dict(self._events)

    def clear(self) -> None:
        self._events.clear()
