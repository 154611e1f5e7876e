"""
Module: models
Description: Package initialization for Pydantic data models.

- WebhookEvent: Event submitted for delivery
- WebhookResponse: Successful delivery outcome
- ScheduleJob / ScheduleJobResponse / CronExpression: Scheduler models
"""

from .event import WebhookEvent, generate_event_id
from .response import WebhookResponse
from .schedule import CronExpression, ScheduleJob, ScheduleJobResponse

__all__ = [
    "WebhookEvent",
    "generate_event_id",
    "WebhookResponse",
    "CronExpression",
    "ScheduleJob",
    "ScheduleJobResponse",
]
