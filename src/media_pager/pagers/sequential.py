"""Generic sequential pager engine.

The engine owns the consumer-visible item list and asks a ``FetchProvider``
for one page at a time. Providers decide where pages come from; the engine
only appends them, reports the additions, and manages subscriptions that live
as long as the pager is connected.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from ..config import DEFAULT_PAGE_SIZE
from ..data.models import PageResult
from ..exceptions import PagerDisconnectedError
from .streams import Subject, Subscription

T = TypeVar("T")
V = TypeVar("V")

logger = logging.getLogger(__name__)


@dataclass
class PagerConfig:
    """Options shared by every pager."""

    page_size: int = DEFAULT_PAGE_SIZE
    item_key: str | None = None
    passive: bool = False  # passive pagers skip user-data enrichment
    max_size: int | None = None


class FetchProvider(Protocol[T]):
    """Anything that can serve the next page of items."""

    async def fetch_page(self, page_size: int) -> PageResult[T]: ...


class SequentialPager(Generic[T]):
    """Pager that loads pages strictly in order."""

    def __init__(self, provider: FetchProvider[T], config: PagerConfig | None = None) -> None:
        self.provider = provider
        self.config = config or PagerConfig()
        self._items: list[T] = []
        self._size = 0
        self._at_end = False
        self._fetching: asyncio.Task[None] | None = None
        self._items_stream: Subject[list[T]] = Subject(name="items")
        self._additions: Subject[list[T]] = Subject(name="additions")
        self._subscriptions: list[Subscription[Any]] = []
        self._connected = False
        self._disconnected = False

    @property
    def items(self) -> list[T]:
        return self._items

    @items.setter
    def items(self, items: Sequence[T]) -> None:
        self._items = list(items)
        self._items_stream.emit(self._items)

    @property
    def size(self) -> int:
        return self._size

    @property
    def at_end(self) -> bool:
        return self._at_end

    @property
    def busy(self) -> bool:
        return self._fetching is not None

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def disconnected(self) -> bool:
        return self._disconnected

    def observe_items(self) -> Subject[list[T]]:
        return self._items_stream

    def observe_additions(self) -> Subject[list[T]]:
        return self._additions

    def connect(self) -> None:
        if self._disconnected:
            raise PagerDisconnectedError()
        self._connected = True

    def disconnect(self) -> None:
        """Tear down every subscription; the pager cannot be reconnected."""
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()
        self._connected = False
        self._disconnected = True
        self._items_stream.complete()
        self._additions.complete()

    def subscribe_to(self, stream: Subject[V], handler: Callable[[V], None]) -> Subscription[V]:
        """Subscribe ``handler`` to ``stream`` until the pager disconnects."""
        sub = stream.subscribe(handler)
        self._subscriptions.append(sub)
        return sub

    def reset(self, items: Sequence[T], *, total: int, at_end: bool) -> None:
        """Replace the visible items without going through the provider.

        Items that were not visible before the reset are reported as additions.
        """
        previous = {id(item) for item in self._items}
        self._size = total
        self._at_end = at_end
        self.items = items
        added = [item for item in self._items if id(item) not in previous]
        if added:
            self._additions.emit(added)

    async def fetch_next(self) -> list[T]:
        """Load the next page; concurrent callers share one in-flight fetch."""
        if self._disconnected:
            return self._items
        if not self._connected:
            self.connect()
        if self._at_end:
            return self._items

        if self._fetching is None:
            self._fetching = asyncio.create_task(self._fetch_page())
        await self._fetching
        return self._items

    async def _fetch_page(self) -> None:
        try:
            result = await self.provider.fetch_page(self.config.page_size)
            added = list(result.items)
            max_size = self.config.max_size
            if max_size is not None and len(self._items) + len(added) >= max_size:
                added = added[: max(0, max_size - len(self._items))]
                self._at_end = True
            else:
                self._at_end = result.at_end
            self._size = result.total
            if added:
                self.items = [*self._items, *added]
                self._additions.emit(added)
        finally:
            self._fetching = None
