"""Retry-wrapped remote calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from ..config import get_settings
from ..exceptions import RemoteFetchError, RetryExhaustedError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _is_retryable(error: BaseException) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status == 429 or status >= 500
    if isinstance(error, RemoteFetchError):
        return error.retryable
    return False


def _retry_after(error: BaseException) -> float | None:
    """Seconds requested by a 429 ``Retry-After`` header, if any."""
    if not isinstance(error, httpx.HTTPStatusError) or error.response.status_code != 429:
        return None
    header = error.response.headers.get("retry-after")
    try:
        return float(header) if header is not None else None
    except ValueError:
        return None


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_retries: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> T:
    """Await ``fn()``, retrying transient failures with exponential backoff.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt
        max_retries: Retries after the first attempt (defaults from settings)
        base_delay: First backoff delay in seconds (defaults from settings)
        max_delay: Cap for any single delay in seconds (defaults from settings)

    Raises:
        RetryExhaustedError: When every attempt failed with a retryable error
    """
    settings = get_settings()
    retries = settings.retry_max_attempts if max_retries is None else max_retries
    base = settings.retry_base_delay if base_delay is None else base_delay
    cap = settings.retry_max_delay if max_delay is None else max_delay

    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as e:
            if not _is_retryable(e):
                raise
            if attempt >= retries:
                raise RetryExhaustedError(attempt + 1, e) from e

            delay = _retry_after(e)
            if delay is None:
                delay = base * (2**attempt)
            delay = min(delay, cap)
            attempt += 1
            logger.warning("Remote call failed (%s), retry %d/%d in %.2fs", e, attempt, retries, delay)
            await asyncio.sleep(delay)
