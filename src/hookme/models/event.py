"""
Module: event.py
Description: Webhook event model for the Hookme SDK.

Defines the unit of delivery: a provider name plus an opaque payload,
identified by an id and creation timestamp that are assigned once.

Key Components:
- WebhookEvent: Event model forwarded to the Hookme service
- generate_event_id(): evt_-prefixed identifier generator

Dependencies: pydantic, datetime, uuid, typing
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def generate_event_id() -> str:
    """Generate a new event identifier (evt_ + 12 hex characters)."""
    return f"evt_{uuid4().hex[:12]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


_IDENTITY_FIELDS = ("id", "created_at")


class WebhookEvent(BaseModel):
    """
    Event model representing a webhook notification.

    Provider and payload are not validated here: an event with an empty
    provider or no payload can be built, and is rejected by the delivery
    engine before it is queued or persisted.

    id and created_at are write-once: assigning a different value once
    either is set raises ValueError.

    Attributes:
        id: Unique event identifier, generated when absent
        provider: Destination channel kind (e.g. 'telegram', 'discord', 'email')
        payload: Opaque provider-defined data, forwarded as-is
        created_at: Timestamp of first construction
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )

    id: Optional[str] = Field(
        default_factory=generate_event_id,
        description="Unique event identifier"
    )
    provider: str = Field(
        default="",
        max_length=100,
        description="Destination provider"
    )
    payload: Any = Field(
        default=None,
        description="Provider-defined event payload"
    )
    created_at: Optional[datetime] = Field(
        default_factory=_utcnow,
        description="Event creation timestamp"
    )

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IDENTITY_FIELDS:
            current = getattr(self, name)
            if current and value != current:
                raise ValueError(f"{name} cannot be changed once set")
        super().__setattr__(name, value)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "WebhookEvent":
        """Build an event from a plain mapping, accepting 'data' as an alias of 'payload'."""
        values = dict(data)
        if "payload" not in values and "data" in values:
            values["payload"] = values.pop("data")
        return cls(**values)

    def ensure_identity(self) -> None:
        """Assign id and created_at if unset; existing values are never replaced."""
        if not self.id:
            self.id = generate_event_id()
        if self.created_at is None:
            self.created_at = _utcnow()

    def to_store(self) -> Dict[str, Any]:
        """JSON-compatible representation used by durable stores."""
        return self.model_dump(mode="json")
