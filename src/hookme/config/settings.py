"""
Module: settings.py
Description: SDK configuration using pydantic-settings.

Configures the Hookme client from environment variables (prefixed
HOOKME_) with validation and defaults. Supports .env files for
local development.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOOKME_URL = "http://localhost:5001"


class HookmeSettings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HOOKME_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Destination settings
    url: str = Field(default=DEFAULT_HOOKME_URL, description="Base URL of the Hookme service")
    tenant_id: str = Field(..., description="Tenant identifier used in request paths")
    api_key: str = Field(default="", description="API key sent in the x-api-key header")

    # Loop settings
    retry_interval: float = Field(
        default=5,
        gt=0,
        description="Seconds between retry loop passes"
    )
    emit_interval: float = Field(
        default=1,
        gt=0,
        description="Seconds between emit loop drains"
    )
    request_delay: float = Field(
        default=0.1,
        ge=0,
        description="Seconds to wait between consecutive sends"
    )
    emit_cooldown: float = Field(
        default=10,
        ge=0,
        description="Seconds before a failed emit is re-appended to the queue"
    )

    # Transport settings
    request_timeout: float = Field(
        default=10,
        gt=0,
        le=120,
        description="HTTP timeout in seconds for delivery attempts"
    )
    connect_retries: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Retries for connection errors before a request is sent"
    )

    # Storage settings
    store_path: Optional[str] = Field(
        default=None,
        description="Path of the JSON file store; in-memory store when unset"
    )

    log_level: str = Field(default="INFO", description="Minimum logging level")

    @field_validator('tenant_id')
    @classmethod
    def validate_tenant_id(cls, v: str) -> str:
        """Validate the tenant identifier is present."""
        if not v or not v.strip():
            raise ValueError("tenant_id is required")
        return v.strip()

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Strip trailing slashes so paths can be appended."""
        return v.strip().rstrip("/")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @classmethod
    def local(cls, **overrides) -> "HookmeSettings":
        """Settings for a Hookme service running on localhost."""
        values = {"url": DEFAULT_HOOKME_URL, "tenant_id": "default"}
        values.update(overrides)
        return cls(**values)
