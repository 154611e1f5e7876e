"""
Module: response.py
Description: Response models returned by the Hookme service.

Key Components:
- WebhookResponse: Parsed body of a successful webhook delivery

Dependencies: pydantic, datetime, typing
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WebhookResponse(BaseModel):
    """
    Successful delivery outcome.

    Attributes:
        id: Identifier assigned by the remote service
        status: Remote processing status (e.g. 'pending')
        created_at: When the remote service accepted the webhook
        updated_at: Last remote status change (nullable)
        error: Remote error text, if any
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Remote webhook identifier")
    status: str = Field(..., description="Remote webhook status")
    created_at: datetime = Field(..., description="Remote creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Remote update timestamp")
    error: Optional[str] = Field(default=None, description="Remote error message")
