"""
Module: loops.py
Description: Background delivery loops.

Key Components:
- PeriodicTask: Cancellable asyncio task calling run_once() on an interval
- EmitLoop: Drains the emit queue (first attempts)
- RetryLoop: Re-attempts events in the retry set

Each pass isolates its items: one event's failure is logged and the
pass moves on to the next event. Tests drive a single pass by
awaiting run_once() directly.
"""

import asyncio
from typing import Optional, Set

from hookme.delivery.engine import DeliveryEngine
from hookme.delivery.queues import EmitQueue, RetrySet
from hookme.exceptions import DeliveryFailedError, EventValidationError, HookmeError
from hookme.models.event import WebhookEvent
from hookme.storage.base import EventStore
from hookme.utils.logger import get_logger

logger = get_logger(__name__)


class PeriodicTask:
    """Runs run_once() every interval seconds until stopped."""

    name = "periodic"

    def __init__(self, interval: float):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        logger.debug("Loop started", loop=self.name, interval=self.interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("Loop stopped", loop=self.name)

    async def _run(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(
                    "Loop pass failed",
                    loop=self.name,
                    error=str(e),
                    error_type=type(e).__name__
                )
            await asyncio.sleep(self.interval)

    async def run_once(self) -> None:
        raise NotImplementedError


class EmitLoop(PeriodicTask):
    """
    First-attempt delivery of enqueued events.

    A failed event is re-appended to the tail after a cooldown rather
    than immediately, so an outage is not hammered once per pass.
    """

    name = "hookme-emit"

    def __init__(
        self,
        engine: DeliveryEngine,
        store: EventStore,
        interval: float = 1,
        request_delay: float = 0.1,
        cooldown: float = 10
    ):
        super().__init__(interval)
        self.engine = engine
        self.store = store
        self.queue = EmitQueue()
        self.request_delay = request_delay
        self.cooldown = cooldown
        self._requeues: Set[asyncio.TimerHandle] = set()

    @property
    def pending_requeues(self) -> int:
        return len(self._requeues)

    def enqueue(self, event: WebhookEvent) -> WebhookEvent:
        """
        Admit an event to the queue and persist it.

        Raises:
            EventValidationError: If the event is malformed; nothing is queued or stored
        """
        self.engine.validate(event)
        event.ensure_identity()

        self.queue.append(event)
        self.store.set(event.id, event)

        logger.debug(
            "Event enqueued",
            event_id=event.id,
            provider=event.provider,
            queue_size=len(self.queue)
        )
        return event

    async def run_once(self) -> None:
        """Drain the events queued when the pass starts; requeues wait for a later pass."""
        for remaining in range(len(self.queue), 0, -1):
            event = self.queue.popleft()
            if event is None:
                break
            # Delivered by the retry loop while waiting out a cooldown
            if not self.store.has(event.id):
                logger.debug("Skipping delivered event", event_id=event.id)
                continue
            try:
                outcome = await self.engine.attempt(event)
            except EventValidationError as e:
                logger.error(
                    "Dropping invalid event",
                    event_id=event.id,
                    error=e.message
                )
                continue
            except DeliveryFailedError:
                self._schedule_requeue(event)
                continue
            except Exception as e:
                logger.error(
                    "Unexpected error delivering event",
                    event_id=event.id,
                    error=str(e),
                    error_type=type(e).__name__
                )
                self._schedule_requeue(event)
                continue

            if outcome is not None:
                self.store.delete(event.id)

            if remaining > 1 and self.request_delay:
                await asyncio.sleep(self.request_delay)

    def _schedule_requeue(self, event: WebhookEvent) -> None:
        loop = asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def requeue() -> None:
            self._requeues.discard(handle)
            if self.store.has(event.id):
                self.queue.append(event)

        handle = loop.call_later(self.cooldown, requeue)
        self._requeues.add(handle)

        logger.info(
            "Event requeue scheduled",
            event_id=event.id,
            cooldown_seconds=self.cooldown
        )

    async def stop(self) -> None:
        # Cancelled requeues stay recoverable: failed events are already in the store
        for handle in self._requeues:
            handle.cancel()
        self._requeues.clear()
        await super().stop()


class RetryLoop(PeriodicTask):
    """
    Redelivery of events in the retry set.

    Attempts run with no_backoff since the entry is already tracked.
    An event that still fails stays in the set for the next pass.
    """

    name = "hookme-retry"

    def __init__(
        self,
        engine: DeliveryEngine,
        retry_set: RetrySet,
        interval: float = 5,
        request_delay: float = 0.1
    ):
        super().__init__(interval)
        self.engine = engine
        self.retry_set = retry_set
        self.request_delay = request_delay

    async def run_once(self) -> None:
        """Attempt every event present at the start of the pass."""
        pending = self.retry_set.snapshot()
        if pending:
            logger.debug("Retry pass started", pending=len(pending))

        for index, event in enumerate(pending):
            if index and self.request_delay:
                await asyncio.sleep(self.request_delay)

            # Delivered elsewhere since the snapshot was taken
            if event.id not in self.retry_set:
                continue

            try:
                outcome = await self.engine.attempt(event, no_backoff=True)
            except HookmeError as e:
                logger.warning(
                    "Retry failed, keeping event for next pass",
                    event_id=event.id,
                    status_code=e.status_code,
                    error=e.message
                )
                continue
            except Exception as e:
                logger.error(
                    "Unexpected error retrying event",
                    event_id=event.id,
                    error=str(e),
                    error_type=type(e).__name__
                )
                continue

            if outcome is not None:
                self.retry_set.remove(event.id)
