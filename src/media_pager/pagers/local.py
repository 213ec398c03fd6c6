"""Serve local pages out of a fully drained buffer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

from ..data.models import PageResult
from .bulk_fetch import BulkFetcher

T = TypeVar("T")

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    NOT_STARTED = "not_started"
    LOADING = "loading"
    LOADED = "loaded"


class LocalPaginator(Generic[T]):
    """Fetch provider that slices an in-memory buffer.

    The first page request drains the remote source once; every request
    after that is answered from the buffer. ``on_loaded`` runs on the
    freshly filled buffer before the first slice is taken.
    """

    def __init__(
        self,
        fetcher: BulkFetcher[T],
        on_loaded: Callable[[list[T]], None] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._on_loaded = on_loaded
        self._buffer: list[T] = []
        self._load_state = LoadState.NOT_STARTED
        self._load_task: asyncio.Task[None] | None = None
        self._cursor = 0

    @property
    def buffer(self) -> list[T]:
        return self._buffer

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    @property
    def cursor(self) -> int:
        """Number of local pages already served."""
        return self._cursor

    async def ensure_loaded(self) -> None:
        """Run the bulk fetch once; concurrent callers wait on the same load."""
        if self._load_state is LoadState.LOADED:
            return
        if self._load_task is None:
            self._load_state = LoadState.LOADING
            self._load_task = asyncio.create_task(self._load())
        await self._load_task

    async def _load(self) -> None:
        try:
            self._buffer = await self._fetcher.fetch_all()
            if self._on_loaded is not None:
                self._on_loaded(self._buffer)
        except Exception:
            logger.exception("Loading the buffer failed, serving %d items", len(self._buffer))
        finally:
            self._load_state = LoadState.LOADED
        logger.debug("Buffer loaded with %d items", len(self._buffer))

    async def fetch_page(self, page_size: int) -> PageResult[T]:
        await self.ensure_loaded()

        start = self._cursor * page_size
        end = start + page_size
        items = self._buffer[start:end]
        self._cursor += 1

        return PageResult(items=items, total=len(self._buffer), at_end=end >= len(self._buffer))

    def reset(self, page_size: int) -> list[T]:
        """Restart from the top, returning page one as already served."""
        self._cursor = 1
        return self._buffer[:page_size]
