"""
Module: exceptions.py
Description: Exception hierarchy for the Hookme SDK.

Key Components:
- HookmeError: Base class carrying a message and status code
- EventValidationError: Malformed event or configuration, never retried
- DeliveryFailedError: Transport failure or non-success response
- ScheduleFailedError: Scheduling request rejected or unreachable
"""

from typing import Optional


class HookmeError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class EventValidationError(HookmeError):
    """Event or destination is invalid; the event is never queued."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class DeliveryFailedError(HookmeError):
    """A delivery attempt reached the transport and did not succeed."""

    def __init__(self, message: str, status_code: int, event_id: Optional[str] = None):
        super().__init__(message, status_code=status_code)
        self.event_id = event_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"


class ScheduleFailedError(HookmeError):
    """A schedule or unschedule request did not succeed."""
