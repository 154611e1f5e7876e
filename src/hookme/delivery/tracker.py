"""
Module: tracker.py
Description: In-flight tracking for delivery attempts.

Holds exactly the events whose transport call is outstanding. Only
the delivery engine mutates it.
"""

from typing import Dict, Optional

from hookme.models.event import WebhookEvent


class InFlightTracker:
    """Mapping of event id to the event currently being sent."""

    def __init__(self):
        self._events: Dict[str, WebhookEvent] = {}

    def add(self, event: WebhookEvent) -> bool:
        """Mark event as in flight. Returns False if it already was."""
        if event.id in self._events:
            return False
        self._events[event.id] = event
        return True

    def discard(self, event_id: str) -> None:
        self._events.pop(event_id, None)

    def get(self, event_id: str) -> Optional[WebhookEvent]:
        return self._events.get(event_id)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    def __len__(self) -> int:
        return len(self._events)
