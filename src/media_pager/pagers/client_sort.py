"""Pager that sorts a whole remote listing on the client.

The remote source is drained once into a buffer (capped at ``max_items``),
sorted by the persisted preference for ``sort_id``, and then handed out in
local pages. When the preference changes the buffer is re-sorted in place and
the consumer is reset to the first page of the new order.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Coroutine, Mapping, Sequence
from dataclasses import replace
from typing import Any

from ..config import Settings, get_settings
from ..data.mapping import ARTIST_ITEM_TYPE, create_media_object, create_sortable_media_artist
from ..data.models import MediaObject, SortParams, is_media_field
from ..preferences import SortPreferenceStore
from ..remote.client import FetchData
from ..sorting import apply_sorting
from .bulk_fetch import BulkFetcher
from .local import LoadState, LocalPaginator
from .sequential import PagerConfig, SequentialPager
from .streams import Subject

logger = logging.getLogger(__name__)

AddUserData = Callable[[Sequence[MediaObject]], Coroutine[Any, Any, None]]


def _build_config(options: PagerConfig | Mapping[str, Any] | None, settings: Settings) -> PagerConfig:
    if isinstance(options, PagerConfig):
        config = replace(options)
    else:
        config = PagerConfig(**{"page_size": settings.page_size, **(options or {})})
    if not config.page_size:
        config.page_size = settings.page_size
    if config.item_key is not None and not is_media_field(config.item_key):
        logger.debug("Ignoring unknown item key %r", config.item_key)
        config.item_key = None
    return config


class ClientSortPager:
    """Client-side sorting pager over a cursor/offset-paginated catalog endpoint.

    Args:
        fetch_data: ``(offset, limit, cursor)`` coroutine returning a remote page
        sort_id: Preference key this listing is sorted by; None keeps remote order
        options: Pager options (page size, item key, passive flag)
        in_library: Library flag stamped on every mapped item
        secondary_sort_id: Tie-break key carried by artist rows
        preferences: Store holding the sort preference for ``sort_id``
        add_user_data: Enrichment run on every batch of newly visible items
        settings: Overrides for buffer and fetch sizes
    """

    def __init__(
        self,
        fetch_data: FetchData,
        sort_id: str | None = None,
        options: PagerConfig | Mapping[str, Any] | None = None,
        in_library: bool | None = None,
        secondary_sort_id: str | None = None,
        *,
        preferences: SortPreferenceStore | None = None,
        add_user_data: AddUserData | None = None,
        settings: Settings | None = None,
    ) -> None:
        if sort_id and preferences is None:
            raise ValueError("A sort preference store is required when sort_id is set")

        settings = settings or get_settings()
        self.sort_id = sort_id
        self.in_library = in_library
        self.secondary_sort_id = secondary_sort_id
        self._preferences = preferences
        self._add_user_data = add_user_data
        self._enrichments: set[asyncio.Task[None]] = set()

        fetcher = BulkFetcher(
            fetch_data,
            self._create_item,
            max_items=settings.max_items,
            fetch_size=settings.fetch_size,
        )
        self._paginator: LocalPaginator[MediaObject] = LocalPaginator(
            fetcher, on_loaded=self._apply_sorting_if_needed
        )
        self._pager: SequentialPager[MediaObject] = SequentialPager(
            self._paginator, _build_config(options, settings)
        )

    @property
    def config(self) -> PagerConfig:
        return self._pager.config

    @property
    def items(self) -> list[MediaObject]:
        return self._pager.items

    @property
    def size(self) -> int:
        return self._pager.size

    @property
    def at_end(self) -> bool:
        return self._pager.at_end

    @property
    def page_cursor(self) -> int:
        return self._paginator.cursor

    @property
    def load_state(self) -> LoadState:
        return self._paginator.load_state

    @property
    def buffer(self) -> tuple[MediaObject, ...]:
        return tuple(self._paginator.buffer)

    def observe_items(self) -> Subject[list[MediaObject]]:
        return self._pager.observe_items()

    def observe_additions(self) -> Subject[list[MediaObject]]:
        return self._pager.observe_additions()

    def connect(self) -> None:
        if self._pager.disconnected or self._pager.connected:
            return
        self._pager.connect()

        if not self.config.passive and self._add_user_data is not None:
            self._pager.subscribe_to(
                self._pager.observe_additions(),
                functools.partial(self._enrich, self._add_user_data),
            )

        if self.sort_id and self._preferences is not None:
            self._pager.subscribe_to(
                self._preferences.observe_preference_changes(self.sort_id),
                self._on_sort_change,
            )

    def disconnect(self) -> None:
        self._pager.disconnect()

    async def fetch_next(self) -> list[MediaObject]:
        """Serve the next local page, draining the remote source on first use."""
        self.connect()
        return await self._pager.fetch_next()

    def _create_item(self, raw: dict[str, Any]) -> MediaObject:
        if self.secondary_sort_id and raw.get("type") == ARTIST_ITEM_TYPE:
            return create_sortable_media_artist(raw, self.in_library, self.secondary_sort_id)
        return create_media_object(raw, self.in_library)

    def _apply_sorting_if_needed(self, items: list[MediaObject]) -> None:
        if self.sort_id and self._preferences is not None and items:
            sort_params = self._preferences.get_preference(self.sort_id)
            if sort_params:
                apply_sorting(items, sort_params)

    def _on_sort_change(self, sort_params: SortParams | None) -> None:
        if sort_params and self._paginator.buffer:
            apply_sorting(self._paginator.buffer, sort_params)
            self._reset_pagination()

    def _reset_pagination(self) -> None:
        page_size = self.config.page_size
        first_page = self._paginator.reset(page_size)
        total = len(self._paginator.buffer)
        self._pager.reset(first_page, total=total, at_end=page_size >= total)

    def _enrich(self, add_user_data: AddUserData, items: list[MediaObject]) -> None:
        task = asyncio.get_running_loop().create_task(add_user_data(items))
        self._enrichments.add(task)
        task.add_done_callback(self._enrichment_done)

    def _enrichment_done(self, task: asyncio.Task[None]) -> None:
        self._enrichments.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("User data enrichment failed: %s", task.exception())
