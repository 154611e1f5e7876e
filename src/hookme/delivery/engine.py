"""
Module: engine.py
Description: Single delivery attempt orchestration.

The engine validates an event, guards against concurrent sends of the
same id, calls the transport, and routes the outcome:

- success: the event is removed from the store and the retry set
- failure: unless no_backoff, the event is persisted and added to the
  retry set, then DeliveryFailedError is raised

The engine never retries on its own; the emit and retry loops do.
"""

from typing import Optional

from pydantic import ValidationError

from hookme.delivery.queues import RetrySet
from hookme.delivery.tracker import InFlightTracker
from hookme.delivery.transport import Transport
from hookme.exceptions import DeliveryFailedError, EventValidationError
from hookme.models.event import WebhookEvent
from hookme.models.response import WebhookResponse
from hookme.storage.base import EventStore
from hookme.utils.logger import get_logger

logger = get_logger(__name__)

# Status reported when the transport raised before any response arrived
TRANSPORT_ERROR_STATUS = 500


class DeliveryEngine:
    """
    Runs delivery attempts against one destination.

    Attributes:
        transport: Performs the HTTP call
        store: Durable mirror of undelivered events
        retry_set: Events awaiting redelivery
        tracker: Events with an outstanding transport call
    """

    def __init__(
        self,
        transport: Transport,
        store: EventStore,
        retry_set: RetrySet,
        url: str,
        tenant_id: str,
        api_key: str = ""
    ):
        self.transport = transport
        self.store = store
        self.retry_set = retry_set
        self.tracker = InFlightTracker()
        self.url = url
        self.tenant_id = tenant_id
        self.api_key = api_key

    def validate(self, event: WebhookEvent) -> None:
        """
        Reject events that can never be delivered.

        Raises:
            EventValidationError: If provider, payload or the destination URL is missing
        """
        if not event.provider:
            raise EventValidationError("provider is required")
        if event.payload is None:
            raise EventValidationError("payload is required")
        if not self.url:
            raise EventValidationError("url is required")

    async def attempt(
        self,
        event: WebhookEvent,
        no_backoff: bool = False
    ) -> Optional[WebhookResponse]:
        """
        Deliver one event.

        Args:
            event: Event to deliver; id and created_at are assigned if unset
            no_backoff: Skip store/retry-set admission on failure

        Returns:
            Parsed success response, or None if the same event id is
            already being sent

        Raises:
            EventValidationError: If the event is malformed (nothing is persisted)
            DeliveryFailedError: If the transport failed or returned non-success
        """
        self.validate(event)
        event.ensure_identity()

        if not self.tracker.add(event):
            logger.info(
                "Event already in flight, skipping",
                event_id=event.id,
                provider=event.provider
            )
            return None

        try:
            return await self._send(event, no_backoff)
        finally:
            self.tracker.discard(event.id)

    async def _send(self, event: WebhookEvent, no_backoff: bool) -> WebhookResponse:
        try:
            response = await self.transport.post(
                self.url,
                self.tenant_id,
                self.api_key,
                event
            )
        except Exception as e:
            raise self._fail(
                event,
                str(e) or type(e).__name__,
                TRANSPORT_ERROR_STATUS,
                no_backoff
            ) from e

        if not response.ok:
            raise self._fail(event, response.error_message(), response.status_code, no_backoff)

        try:
            outcome = WebhookResponse.model_validate(response.body)
        except ValidationError as e:
            raise self._fail(
                event,
                f"invalid response body: {e.error_count()} validation errors",
                response.status_code,
                no_backoff
            ) from e

        if self.store.has(event.id):
            self.store.delete(event.id)
        self.retry_set.remove(event.id)

        logger.info(
            "Event delivered",
            event_id=event.id,
            provider=event.provider,
            status_code=response.status_code,
            remote_id=outcome.id,
            remote_status=outcome.status
        )
        return outcome

    def _fail(
        self,
        event: WebhookEvent,
        message: str,
        status_code: int,
        no_backoff: bool
    ) -> DeliveryFailedError:
        if not no_backoff:
            self.backoff(event)

        logger.warning(
            "Event delivery failed",
            event_id=event.id,
            provider=event.provider,
            status_code=status_code,
            error=message,
            backoff=not no_backoff
        )
        return DeliveryFailedError(message, status_code, event_id=event.id)

    def backoff(self, event: WebhookEvent) -> bool:
        """
        Persist a failed event and admit it to the retry set.

        Both steps are idempotent. Returns True if the retry set did not
        already hold the event.
        """
        if not self.store.has(event.id):
            self.store.set(event.id, event)
        return self.retry_set.add(event)
