"""
Module: client.py
Description: HookmeClient, the SDK entry point.

Wires the store, transport, delivery engine, background loops and
scheduler client together for one destination. Each client owns its
own queues, so independent clients never share state.

Example:
    >>> async with HookmeClient.create(HookmeSettings(tenant_id="acme")) as client:
    ...     client.enqueue({"provider": "telegram", "payload": {"message": "hi"}})
    ...     await client.wait_for_retry()
"""

import asyncio
from typing import Any, Mapping, Optional, Union

import httpx

from hookme.config.settings import HookmeSettings
from hookme.delivery.engine import DeliveryEngine
from hookme.delivery.loops import EmitLoop, RetryLoop
from hookme.delivery.queues import RetrySet
from hookme.delivery.reconciler import StartupReconciler
from hookme.delivery.transport import PushTransport, Transport
from hookme.models.event import WebhookEvent
from hookme.models.response import WebhookResponse
from hookme.models.schedule import ScheduleJob, ScheduleJobResponse
from hookme.scheduling.client import SchedulerClient
from hookme.storage.base import EventStore
from hookme.storage.file import FileStore
from hookme.storage.memory import MemoryStore
from hookme.utils.logger import configure_logging, get_logger
from hookme.version import USER_AGENT, VERSION, VERSION_CODE

logger = get_logger(__name__)

EventLike = Union[WebhookEvent, Mapping[str, Any]]


class HookmeClient:
    """
    Webhook delivery client.

    Background work (startup reconciliation, emit loop, retry loop)
    starts from the constructor when an event loop is running and
    autostart is True; otherwise call start() or use `async with`.

    Logging is process-wide: a client reconfigures structlog only when
    its settings set log_level explicitly (argument or HOOKME_LOG_LEVEL),
    and the last such client wins.

    Attributes:
        settings: Client configuration
        store: Durable mirror of undelivered events
        engine: Single-attempt delivery engine
        emit_loop: First-attempt loop owning the emit queue
        retry_loop: Redelivery loop over the retry set
        reconciler: Startup replay of stored events
        scheduler: Server-side job scheduler client
    """

    VERSION = VERSION
    VERSION_CODE = VERSION_CODE
    USER_AGENT = USER_AGENT

    def __init__(
        self,
        settings: Optional[HookmeSettings] = None,
        store: Optional[EventStore] = None,
        transport: Optional[Transport] = None,
        autostart: bool = True
    ):
        """
        Initialize the client.

        Args:
            settings: Configuration; loaded from HOOKME_* environment variables when None
            store: Event store; FileStore at settings.store_path or MemoryStore when None
            transport: Delivery transport; httpx PushTransport when None
            autostart: Start background work now if an event loop is running

        Raises:
            pydantic.ValidationError: If settings are loaded and tenant_id is missing
        """
        self.settings = settings or HookmeSettings()
        if "log_level" in self.settings.model_fields_set:
            configure_logging(self.settings.log_level)

        if store is None:
            store = FileStore(self.settings.store_path) if self.settings.store_path else MemoryStore()
        self.store = store

        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.request_timeout)
        )
        self.transport = transport or PushTransport(
            timeout_seconds=self.settings.request_timeout,
            connect_retries=self.settings.connect_retries,
            client=self._http
        )

        self.retry_set = RetrySet()
        self.engine = DeliveryEngine(
            transport=self.transport,
            store=self.store,
            retry_set=self.retry_set,
            url=self.settings.url,
            tenant_id=self.settings.tenant_id,
            api_key=self.settings.api_key
        )
        self.emit_loop = EmitLoop(
            self.engine,
            self.store,
            interval=self.settings.emit_interval,
            request_delay=self.settings.request_delay,
            cooldown=self.settings.emit_cooldown
        )
        self.retry_loop = RetryLoop(
            self.engine,
            self.retry_set,
            interval=self.settings.retry_interval,
            request_delay=self.settings.request_delay
        )
        self.reconciler = StartupReconciler(
            self.engine,
            self.store,
            request_delay=self.settings.request_delay
        )
        self.scheduler = SchedulerClient(
            self.settings.url,
            self.settings.tenant_id,
            self.settings.api_key,
            client=self._http
        )
        self._started = False

        logger.info(
            "Hookme client initialized",
            url=self.settings.url,
            tenant_id=self.settings.tenant_id,
            store=type(self.store).__name__,
            version=self.get_version_info()
        )

        if autostart:
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop, background work deferred to start()")
            else:
                self.start()

    @classmethod
    def create(cls, settings: HookmeSettings, **kwargs) -> "HookmeClient":
        return cls(settings, **kwargs)

    @classmethod
    def local(cls, store: Optional[EventStore] = None, **kwargs) -> "HookmeClient":
        """Client for a Hookme service on localhost, tenant 'default'."""
        return cls(HookmeSettings.local(), store=store, **kwargs)

    @property
    def started(self) -> bool:
        return self._started

    def get_version_info(self) -> str:
        return self.USER_AGENT

    def start(self) -> None:
        """Start reconciliation and both loops on the running event loop."""
        if self._started:
            return
        self.reconciler.start()
        self.emit_loop.start()
        self.retry_loop.start()
        self._started = True

    async def close(self) -> None:
        """Stop background work and release HTTP resources."""
        await self.emit_loop.stop()
        await self.retry_loop.stop()
        await self.reconciler.stop()
        await self._http.aclose()
        self._started = False

        logger.info(
            "Hookme client closed",
            queued=len(self.emit_loop.queue),
            retrying=len(self.retry_set)
        )

    async def __aenter__(self) -> "HookmeClient":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @staticmethod
    def _coerce(event: EventLike) -> WebhookEvent:
        if isinstance(event, WebhookEvent):
            return event
        if isinstance(event, Mapping):
            return WebhookEvent.from_mapping(event)
        raise TypeError("event must be a WebhookEvent or a mapping")

    async def post(self, event: EventLike) -> Optional[WebhookResponse]:
        """
        Deliver an event now.

        A failed delivery is persisted and handed to the retry loop
        before DeliveryFailedError reaches the caller.

        Returns:
            Remote response, or None if the event is already being sent

        Raises:
            EventValidationError: If the event is malformed
            DeliveryFailedError: If delivery did not succeed
        """
        return await self.engine.attempt(self._coerce(event))

    def enqueue(self, event: EventLike) -> WebhookEvent:
        """
        Queue an event for background delivery.

        Returns:
            The queued event, with id and created_at assigned

        Raises:
            EventValidationError: If the event is malformed
        """
        return self.emit_loop.enqueue(self._coerce(event))

    async def wait_for_retry(self) -> None:
        """
        Wait until every event found in the store at startup was attempted.

        Raises:
            RuntimeError: If background work was never started
        """
        if not self._started and not self.reconciler.ready.is_set():
            raise RuntimeError("client not started; call start() or use 'async with'")
        await self.reconciler.wait()

    async def schedule(self, key: str, job: ScheduleJob) -> ScheduleJobResponse:
        return await self.scheduler.schedule(key, job)

    async def unschedule(self, key: str) -> None:
        await self.scheduler.unschedule(key)
