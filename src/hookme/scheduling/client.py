"""
Module: client.py
Description: Client for the Hookme server-side job scheduler.

Creates and removes cron jobs on the Hookme service. Each call is a
single request/response: nothing is queued, persisted or retried.
"""

import time
from typing import Optional

import httpx
from pydantic import ValidationError

from hookme.delivery.transport import TransportResponse, build_headers, decode_body
from hookme.exceptions import EventValidationError, ScheduleFailedError
from hookme.models.schedule import ScheduleJob, ScheduleJobResponse
from hookme.utils.logger import get_logger

logger = get_logger(__name__)


def _request_id() -> str:
    return str(int(time.time() * 1000))


class SchedulerClient:
    """
    Scheduler endpoint client.

    Example:
        >>> scheduler = SchedulerClient(url, "default", api_key, client)
        >>> await scheduler.schedule("daily-report", job)
        >>> await scheduler.unschedule("daily-report")
    """

    def __init__(
        self,
        url: str,
        tenant_id: str,
        api_key: str = "",
        client: Optional[httpx.AsyncClient] = None
    ):
        self.url = url
        self.tenant_id = tenant_id
        self.api_key = api_key
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(10.0))

    def _job_url(self, key: str) -> str:
        if not key:
            raise EventValidationError("key is required")
        if not self.url:
            raise EventValidationError("url is required")
        if not self.tenant_id:
            raise EventValidationError("tenant_id is required")
        return f"{self.url}/api/v1/{self.tenant_id}/scheduler/{key}"

    async def _request(self, method: str, key: str, **kwargs) -> TransportResponse:
        url = self._job_url(key)
        try:
            response = await self.client.request(
                method,
                url,
                headers=build_headers(self.api_key, _request_id()),
                **kwargs
            )
        except httpx.HTTPError as e:
            logger.error(
                "Scheduler request failed",
                method=method,
                key=key,
                error=str(e),
                error_type=type(e).__name__
            )
            raise ScheduleFailedError(str(e) or type(e).__name__, status_code=500) from e

        result = TransportResponse(status_code=response.status_code, body=decode_body(response))
        if not response.is_success:
            logger.warning(
                "Scheduler request rejected",
                method=method,
                key=key,
                status_code=result.status_code,
                error=result.error_message()
            )
            raise ScheduleFailedError(result.error_message(), status_code=result.status_code)
        return result

    async def schedule(self, key: str, job: ScheduleJob) -> ScheduleJobResponse:
        """
        Create or replace the job stored under key.

        Raises:
            EventValidationError: If key, url or tenant_id is missing
            ScheduleFailedError: If the request fails or is rejected
        """
        result = await self._request("POST", key, json=job.model_dump(exclude_none=True))

        body = result.body if isinstance(result.body, dict) else {}
        try:
            record = ScheduleJobResponse.model_validate({"key": key, **body})
        except ValidationError as e:
            raise ScheduleFailedError(
                f"invalid scheduler response: {e.error_count()} validation errors",
                status_code=result.status_code
            ) from e

        logger.info("Job scheduled", key=record.key, job_status=record.job_status)
        return record

    async def unschedule(self, key: str) -> None:
        """
        Delete the job stored under key.

        Raises:
            EventValidationError: If key, url or tenant_id is missing
            ScheduleFailedError: If the request fails or is rejected
        """
        await self._request("DELETE", key)
        logger.info("Job unscheduled", key=key)

    async def aclose(self) -> None:
        await self.client.aclose()
