"""
Module: reconciler.py
Description: Startup replay of events left in the store.

Events persisted by a previous process are attempted once each, in
the background. Failures go through the engine's normal backoff path
and are picked up by the retry loop afterwards.
"""

import asyncio
from typing import Dict, Optional

from hookme.delivery.engine import DeliveryEngine
from hookme.exceptions import DeliveryFailedError, EventValidationError
from hookme.models.event import WebhookEvent
from hookme.storage.base import EventStore
from hookme.utils.logger import get_logger

logger = get_logger(__name__)


class StartupReconciler:
    """
    One pass over the store contents at startup.

    Attributes:
        ready: Set once every entry read from the store has been attempted
    """

    def __init__(
        self,
        engine: DeliveryEngine,
        store: EventStore,
        request_delay: float = 0.1
    ):
        self.engine = engine
        self.store = store
        self.request_delay = request_delay
        self.ready = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._entries: Optional[Dict[str, WebhookEvent]] = None

    def start(self) -> None:
        """
        Run the pass in the background; only the first call has an effect.

        The store is read here, so events enqueued after start() are left
        to the emit loop.
        """
        if self._task is not None:
            return
        self._entries = self.store.get_all()
        self._task = asyncio.get_running_loop().create_task(
            self.run(),
            name="hookme-reconciler"
        )

    async def wait(self) -> None:
        """Block until the pass has finished."""
        await self.ready.wait()

    async def stop(self) -> None:
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def run(self) -> None:
        """Attempt every event read from the store once, as of start() when it was called."""
        try:
            entries = self._entries if self._entries is not None else self.store.get_all()
            self._entries = None
            if not entries:
                return

            # Without a destination every attempt fails validation; keep the events
            if not self.engine.url:
                logger.error(
                    "Destination url is not set, stored events left for a later run",
                    count=len(entries)
                )
                return

            logger.info("Reconciling stored events", count=len(entries))

            delivered = 0
            for index, (event_id, event) in enumerate(entries.items()):
                if index and self.request_delay:
                    await asyncio.sleep(self.request_delay)

                # Delivered by another loop since the snapshot was taken
                if not self.store.has(event_id):
                    continue

                if not event.id:
                    event.id = event_id

                try:
                    outcome = await self.engine.attempt(event)
                except EventValidationError as e:
                    logger.error(
                        "Discarding invalid stored event",
                        event_id=event_id,
                        error=e.message
                    )
                    self.store.delete(event_id)
                    continue
                except DeliveryFailedError:
                    continue
                except Exception as e:
                    logger.error(
                        "Unexpected error reconciling event",
                        event_id=event_id,
                        error=str(e),
                        error_type=type(e).__name__
                    )
                    continue

                if outcome is not None:
                    delivered += 1
                    if self.store.has(event_id):
                        self.store.delete(event_id)

            logger.info(
                "Reconciliation finished",
                count=len(entries),
                delivered=delivered
            )
        finally:
            self.ready.set()
