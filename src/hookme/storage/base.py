"""
Module: base.py
Description: Store interface for undelivered events.

A store is the durable mirror of events not yet confirmed delivered,
keyed by event id. Every operation touches a single key (except
get_all and clear), so callers never need cross-key transactions.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from hookme.models.event import WebhookEvent


class EventStore(ABC):
    """Key/value store of undelivered events."""

    @abstractmethod
    def set(self, event_id: str, event: WebhookEvent) -> None:
        """Insert or replace the event stored under event_id."""

    @abstractmethod
    def get(self, event_id: str) -> Optional[WebhookEvent]:
        """Return the stored event, or None."""

    @abstractmethod
    def delete(self, event_id: str) -> None:
        """Remove event_id; missing keys are ignored."""

    @abstractmethod
    def has(self, event_id: str) -> bool:
        """Return True if event_id is stored."""

    @abstractmethod
    def get_all(self) -> Dict[str, WebhookEvent]:
        """Return a snapshot of all stored events, in insertion order."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every stored event."""

    def __len__(self) -> int:
        return len(self.get_all())

    def __contains__(self, event_id: object) -> bool:
        return isinstance(event_id, str) and self.has(event_id)
