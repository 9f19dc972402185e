"""Retry logic using tenacity library.

Exponential backoff with jitter for bucket uploads and catalog API calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

import httpx
from botocore.exceptions import (
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from botocore.exceptions import (
    ConnectTimeoutError as BotoConnectTimeoutError,
)
from tenacity import (
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)
from tenacity import (
    retry as _retry,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


def retry_with_backoff(
    *,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    jitter: float = 1.0,
    retry_exceptions: tuple[type[BaseException], ...] = (Exception,),
    logger_instance: logging.Logger | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry decorator with exponential backoff and jitter.

    Args:
        max_retries: Number of retries AFTER the first attempt (total = max_retries + 1)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        jitter: Random jitter added to each wait, in seconds
        retry_exceptions: Tuple of exception types to retry on
        logger_instance: Logger for retry warnings (uses module logger if None)

    Returns:
        Decorator function

    Example:
        @retry_with_backoff(max_retries=3, retry_exceptions=NETWORK_EXCEPTIONS)
        def fetch_levels():
            return httpx.get(url)
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    log = logger_instance or logger

    return _retry(
        reraise=True,
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=base_delay, max=max_delay) + wait_random(0, jitter),
        retry=retry_if_exception_type(retry_exceptions),
        before_sleep=before_sleep_log(log, logging.WARNING),
    )


# Transient failures talking to the catalog service
NETWORK_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.ReadError,
    httpx.RemoteProtocolError,
)

# Transient failures talking to the object store
STORAGE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    EndpointConnectionError,
    ConnectionClosedError,
    BotoConnectTimeoutError,
    ReadTimeoutError,
)
