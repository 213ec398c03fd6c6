"""Drain a paginated remote source into a bounded local buffer."""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from ..config import FETCH_SIZE, MAX_ITEMS
from ..data.models import RemotePage
from ..remote.client import FetchData
from ..remote.retry import call_with_retry

T = TypeVar("T")

logger = logging.getLogger(__name__)

RetryCall = Callable[[Callable[[], Awaitable[RemotePage]]], Awaitable[RemotePage]]


class BulkFetcher(Generic[T]):
    """Repeatedly calls ``fetch_data`` until the source or the buffer is exhausted.

    Stops when the buffer holds ``max_items``, when a page has no ``next``
    token, when a page is shorter than ``fetch_size``, or when a call still
    fails after retries. A failure keeps whatever was already fetched.
    """

    def __init__(
        self,
        fetch_data: FetchData,
        create_item: Callable[[dict[str, Any]], T],
        *,
        max_items: int = MAX_ITEMS,
        fetch_size: int = FETCH_SIZE,
        retry_call: RetryCall = call_with_retry,
    ) -> None:
        self.fetch_data = fetch_data
        self.create_item = create_item
        self.max_items = max_items
        self.fetch_size = fetch_size
        self._retry_call = retry_call

    def _convert(self, raw: Any) -> T | None:
        if not isinstance(raw, dict):
            return None
        try:
            return self.create_item(raw)
        except Exception as e:
            logger.debug("Skipping malformed catalog item: %s", e)
            return None

    async def fetch_all(self) -> list[T]:
        items: list[T] = []
        has_more = True
        offset = 0
        cursor = ""

        while has_more and len(items) < self.max_items:
            try:
                page = await self._retry_call(
                    functools.partial(self.fetch_data, offset, self.fetch_size, cursor)
                )
            except Exception as e:
                logger.warning("Error fetching catalog page at offset %d: %s", offset, e)
                break

            for raw in page.items:
                item = self._convert(raw)
                if item is not None:
                    items.append(item)

            has_more = bool(page.next) and len(page.items) == self.fetch_size
            offset += self.fetch_size
            cursor = page.next or ""

        del items[self.max_items :]
        logger.debug("Fetched %d catalog items", len(items))
        return items
