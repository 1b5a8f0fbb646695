"""
Bounded retry policy for transient inference-service failures.
"""

import asyncio
import logging
from typing import Callable

import httpx
from google.genai import errors as genai_errors
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger("lexicast")

TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504}

# Statuses the file store answers with before it accepts an upload.
UPLOAD_REJECTED_STATUS_CODES = {429, 503}

# The SDK transport is httpx; its errors do not derive from the builtin ones.
TRANSPORT_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    ConnectionError,
    asyncio.TimeoutError,
)

# Failures that happen before a single request byte reaches the service.
NOT_SENT_ERRORS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.PoolTimeout,
    ConnectionRefusedError,
)


def is_transient_error(exc: BaseException) -> bool:
    """Network hiccups and throttling are retried; everything else fails at once."""
    if isinstance(exc, genai_errors.APIError):
        return getattr(exc, "code", None) in TRANSIENT_STATUS_CODES
    return isinstance(exc, TRANSPORT_ERRORS)


def is_unsent_upload_error(exc: BaseException) -> bool:
    """
    True when a failed upload cannot have created a remote file.

    A read timeout or a reset mid-transfer may leave a file behind that we
    never get a handle for, so those are not retried.
    """
    if isinstance(exc, genai_errors.APIError):
        return getattr(exc, "code", None) in UPLOAD_REJECTED_STATUS_CODES
    return isinstance(exc, NOT_SENT_ERRORS)


def retrying(
    attempts: int,
    *,
    backoff: float = 1.0,
    max_backoff: float = 30.0,
    predicate: Callable[[BaseException], bool] = is_transient_error,
) -> AsyncRetrying:
    """Async retry loop: ``async for attempt in retrying(n): with attempt: ...``."""
    return AsyncRetrying(
        retry=retry_if_exception(predicate),
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=backoff, min=backoff, max=max_backoff),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
