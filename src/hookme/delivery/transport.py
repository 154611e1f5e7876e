"""
Module: transport.py
Description: HTTP transport for webhook delivery.

Performs the POST for one event and returns the raw status and body.
The transport never interprets success or failure; that is the
delivery engine's job.

Key Components:
- Transport: Protocol consumed by the delivery engine
- TransportResponse: Status code plus decoded body
- PushTransport: httpx implementation
"""

from typing import Any, Dict, Optional, Protocol

import httpx
from pydantic import BaseModel, Field

from hookme.delivery.retry import connect_retrying
from hookme.models.event import WebhookEvent
from hookme.utils.logger import get_logger
from hookme.version import USER_AGENT

logger = get_logger(__name__)


class TransportResponse(BaseModel):
    """Raw result of one HTTP call."""

    status_code: int = Field(..., description="HTTP status code")
    body: Any = Field(default=None, description="Decoded JSON body, or text when not JSON")

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def error_message(self) -> str:
        """Best-effort error text from the body."""
        if isinstance(self.body, dict) and self.body.get("error"):
            return str(self.body["error"])
        if self.body in (None, ""):
            return f"HTTP {self.status_code}"
        return str(self.body)


class Transport(Protocol):
    """Performs the network call for one event."""

    async def post(
        self,
        base_url: str,
        tenant_id: str,
        api_key: str,
        event: WebhookEvent
    ) -> TransportResponse:
        ...


def build_headers(api_key: str, request_id: Optional[str] = None) -> Dict[str, str]:
    """Headers sent with every Hookme request."""
    headers = {
        'User-Agent': USER_AGENT,
        'x-api-key': api_key,
    }
    if request_id:
        headers['x-request-id'] = request_id
    return headers


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text."""
    try:
        return response.json()
    except ValueError:
        return response.text


class PushTransport:
    """
    httpx client for pushing events to the Hookme service.

    One AsyncClient is shared by every call and closed by aclose().
    """

    def __init__(
        self,
        timeout_seconds: float = 10,
        connect_retries: int = 2,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize push transport.

        Args:
            timeout_seconds: HTTP timeout in seconds
            connect_retries: Retries for connection errors
            client: Preconfigured AsyncClient (tests inject a MockTransport here)
        """
        self.connect_retries = connect_retries
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds, connect=timeout_seconds)
        )

    async def post(
        self,
        base_url: str,
        tenant_id: str,
        api_key: str,
        event: WebhookEvent
    ) -> TransportResponse:
        """
        POST one event to {base_url}/api/v1/{tenant_id}/webhook.

        Raises:
            ValueError: If base_url or tenant_id is empty
            httpx.HTTPError: If the request could not be completed
        """
        if not base_url:
            raise ValueError("url is required")
        if not tenant_id:
            raise ValueError("tenant_id is required")

        url = f"{base_url}/api/v1/{tenant_id}/webhook"
        body = {
            'provider': event.provider,
            'payload': event.payload,
        }

        logger.debug(
            "Posting webhook",
            event_id=event.id,
            provider=event.provider,
            url=url
        )

        async for attempt in connect_retrying(self.connect_retries):
            with attempt:
                response = await self.client.post(
                    url,
                    json=body,
                    headers=build_headers(api_key, event.id)
                )

        return TransportResponse(
            status_code=response.status_code,
            body=decode_body(response)
        )

    async def aclose(self) -> None:
        await self.client.aclose()
