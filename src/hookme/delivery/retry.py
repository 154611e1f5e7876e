"""
Module: delivery/retry.py
Description: Retry policy for connection-level transport failures.

Only errors raised before a request reaches the server are retried
here, so a retry can never produce a duplicate delivery. Every other
failure is returned to the delivery engine, which decides what to do.
"""

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hookme.utils.logger import get_logger

logger = get_logger(__name__)

CONNECT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Connection failed, retrying",
        attempt=retry_state.attempt_number,
        wait_seconds=round(retry_state.next_action.sleep, 3) if retry_state.next_action else None,
        error=str(exc),
        error_type=type(exc).__name__
    )


def connect_retrying(retries: int) -> AsyncRetrying:
    """
    Build a tenacity controller for connect errors.

    Args:
        retries: Extra attempts after the first one (0 disables retrying)

    Returns:
        AsyncRetrying that re-raises the last error once exhausted
    """
    return AsyncRetrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(CONNECT_ERRORS),
        before_sleep=_log_before_sleep,
        reraise=True
    )
