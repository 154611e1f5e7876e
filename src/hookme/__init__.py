"""
Hookme SDK: reliable webhook delivery to the Hookme service.
"""

from .client import HookmeClient
from .config.settings import HookmeSettings
from .exceptions import DeliveryFailedError, EventValidationError, HookmeError, ScheduleFailedError
from .models import CronExpression, ScheduleJob, ScheduleJobResponse, WebhookEvent, WebhookResponse
from .storage import DynamoDBStore, EventStore, FileStore, MemoryStore
from .version import USER_AGENT, VERSION

__all__ = [
    "HookmeClient",
    "HookmeSettings",
    "HookmeError",
    "EventValidationError",
    "DeliveryFailedError",
    "ScheduleFailedError",
    "WebhookEvent",
    "WebhookResponse",
    "ScheduleJob",
    "ScheduleJobResponse",
    "CronExpression",
    "EventStore",
    "MemoryStore",
    "FileStore",
    "DynamoDBStore",
    "USER_AGENT",
    "VERSION",
]
