"""
Module: conftest.py
Description: Shared pytest fixtures for Hookme SDK tests.

Provides test settings, sample events, an in-memory store, and a
scriptable fake transport so delivery can be tested without a network.
Uses moto for DynamoDB and httpx.MockTransport for HTTP-level tests.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from hookme.config.settings import HookmeSettings
from hookme.delivery.engine import DeliveryEngine
from hookme.delivery.queues import RetrySet
from hookme.delivery.transport import TransportResponse
from hookme.models.event import WebhookEvent
from hookme.storage.memory import MemoryStore


def success_body(remote_id: str = "abc") -> Dict:
    return {
        "id": remote_id,
        "status": "pending",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }


class FakeTransport:
    """
    Transport double recording every call.

    status_code/error apply to every call; fail_ids fail only the listed
    events. Setting gate holds each call open until the gate is set.
    """

    def __init__(self):
        self.status_code = 200
        self.body: Optional[Dict] = None
        self.error: Optional[Exception] = None
        self.fail_ids: set = set()
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[str] = []

    async def post(self, base_url, tenant_id, api_key, event):
        self.calls.append(event.id)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if event.id in self.fail_ids:
            return TransportResponse(status_code=500, body={"error": "Internal Server Error"})
        if self.status_code != 200:
            return TransportResponse(status_code=self.status_code, body={"error": "Internal Server Error"})
        return TransportResponse(status_code=200, body=self.body if self.body is not None else success_body())


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables .env loading and removes delays so loop passes finish
    immediately.
    """
    return HookmeSettings(
        _env_file=None,
        url="http://hookme.test",
        tenant_id="test-tenant",
        api_key="hm_test",
        request_delay=0,
        emit_cooldown=0,
        emit_interval=0.01,
        retry_interval=0.01,
        log_level="DEBUG"
    )


@pytest.fixture
def sample_event():
    """Provide a deliverable telegram event."""
    return WebhookEvent(
        provider="telegram",
        payload={
            "configs": {"chat_id": 123},
            "message": "Hello, world!"
        }
    )


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def retry_set():
    return RetrySet()


@pytest.fixture
def engine(test_settings, fake_transport, memory_store, retry_set):
    """Provide a DeliveryEngine wired to the fake transport and memory store."""
    return DeliveryEngine(
        transport=fake_transport,
        store=memory_store,
        retry_set=retry_set,
        url=test_settings.url,
        tenant_id=test_settings.tenant_id,
        api_key=test_settings.api_key
    )
