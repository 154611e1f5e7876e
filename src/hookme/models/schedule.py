"""
Module: schedule.py
Description: Models for the server-side job scheduler.

Key Components:
- CronExpression: Common cron expressions (seconds field first)
- ScheduleJob: Job definition sent to the scheduler endpoint
- ScheduleJobResponse: Job record returned by the scheduler

Dependencies: pydantic, datetime, enum, typing
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CronExpression(str, Enum):
    """Six-field cron expressions understood by the Hookme scheduler."""

    EVERY_SECOND = "* * * * * *"
    EVERY_5_SECONDS = "*/5 * * * * *"
    EVERY_10_SECONDS = "*/10 * * * * *"
    EVERY_30_SECONDS = "*/30 * * * * *"
    EVERY_MINUTE = "0 * * * * *"
    EVERY_5_MINUTES = "0 */5 * * * *"
    EVERY_HOUR = "0 0 * * * *"
    EVERY_DAY_AT_MIDNIGHT = "0 0 0 * * *"


class ScheduleJob(BaseModel):
    """
    Scheduled webhook job.

    Attributes:
        webhook_url: URL the scheduler calls on each tick
        webhook_data: JSON body sent with each call
        webhook_headers: Extra headers sent with each call
        type: Job type, 'cron' by default
        schedule: Cron expression
        tz: IANA time zone used to evaluate the expression
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        use_enum_values=True
    )

    webhook_url: str = Field(..., min_length=1, description="Target webhook URL")
    webhook_data: Optional[Dict[str, Any]] = Field(default=None, description="Webhook body")
    webhook_headers: Optional[Dict[str, str]] = Field(default=None, description="Webhook headers")
    type: str = Field(default="cron", description="Job type")
    schedule: str = Field(..., min_length=1, description="Cron expression")
    tz: str = Field(default="UTC", description="Time zone")

    @field_validator('webhook_url')
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        """Validate the webhook URL is HTTP(S)."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("webhook_url must be a valid HTTP/HTTPS URL")
        return v


class ScheduleJobResponse(BaseModel):
    """Job record returned by the scheduler."""

    model_config = ConfigDict(extra="allow")

    key: str = Field(..., description="Job key")
    job_status: Any = Field(default=None, description="Scheduler job status")
    created_at: Optional[datetime] = Field(default=None, description="Job creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Job update timestamp")
