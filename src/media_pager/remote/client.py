"""HTTP client for the remote media catalog."""

from __future__ import annotations

import functools
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import httpx

from ..config import get_settings
from ..data.models import ItemType, MediaObject, RemotePage
from ..exceptions import MediaPagerError, RemoteFetchError
from .retry import call_with_retry

logger = logging.getLogger(__name__)

# (offset, limit, cursor) -> page
FetchData = Callable[[int, int, str], Awaitable[RemotePage]]

# Maximum ids per library "contains" request
CONTAINS_BATCH_SIZE = 50

_CONTAINS_ENDPOINTS: dict[str, tuple[str, dict[str, str]]] = {
    "tracks": ("/me/tracks/contains", {}),
    "episodes": ("/me/episodes/contains", {}),
    "albums": ("/me/albums/contains", {}),
    "artists": ("/me/following/contains", {"type": "artist"}),
}


def parse_page(data: Any) -> RemotePage:
    """Read ``items``/``next`` from a page body.

    Cursor-paged endpoints nest the page under a single key, e.g.
    ``{"artists": {"items": [...], "next": ...}}``.
    """
    if isinstance(data, dict) and "items" not in data and len(data) == 1:
        data = next(iter(data.values()))
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise RemoteFetchError("Unexpected page payload")
    return RemotePage(items=data["items"], next=data.get("next"), total=data.get("total"))


def library_kind(item: MediaObject) -> str | None:
    """Name of the library collection ``item`` belongs to, if it has one."""
    if item.item_type == ItemType.MEDIA:
        return "episodes" if item.media_type == "episode" else "tracks"
    if item.item_type == ItemType.ALBUM:
        return "albums"
    if item.item_type == ItemType.ARTIST:
        return "artists"
    return None


class CatalogClient:
    """Thin async wrapper over the catalog's REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        token = token if token is not None else settings.api_token
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            headers=headers,
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def get_page(self, path: str, offset: int, limit: int, cursor: str = "") -> RemotePage:
        """Fetch one page of ``path``.

        A cursor holding a full ``next`` url is requested as-is; any other
        non-empty cursor is sent as ``after``.
        """
        if cursor.startswith(("http://", "https://")):
            response = await self._client.get(cursor)
        else:
            params: dict[str, Any] = {"offset": offset, "limit": limit}
            if cursor:
                params["after"] = cursor
            response = await self._client.get(path, params=params)
        response.raise_for_status()
        return parse_page(response.json())

    def page_fetcher(self, path: str) -> FetchData:
        """Bind ``path`` into the ``(offset, limit, cursor)`` callable pagers expect."""
        return functools.partial(self.get_page, path)

    async def contains(self, kind: str, ids: Sequence[str]) -> list[bool]:
        """Ask the library which of ``ids`` it holds."""
        path, extra = _CONTAINS_ENDPOINTS[kind]
        response = await self._client.get(path, params={**extra, "ids": ",".join(ids)})
        response.raise_for_status()
        flags = response.json()
        if not isinstance(flags, list) or len(flags) != len(ids):
            raise RemoteFetchError(f"Unexpected {kind} contains payload")
        return [bool(flag) for flag in flags]

    async def add_user_data(self, items: Sequence[MediaObject]) -> None:
        """Stamp ``in_library`` on items whose library status is unknown.

        Best-effort: a failed batch is logged and left unknown.
        """
        pending: dict[str, list[MediaObject]] = defaultdict(list)
        for item in items:
            if item.in_library is not None:
                continue
            kind = library_kind(item)
            if kind is not None:
                pending[kind].append(item)

        for kind, group in pending.items():
            for start in range(0, len(group), CONTAINS_BATCH_SIZE):
                batch = group[start : start + CONTAINS_BATCH_SIZE]
                ids = [item.remote_id for item in batch]
                try:
                    flags = await call_with_retry(functools.partial(self.contains, kind, ids))
                except (httpx.HTTPError, MediaPagerError) as e:
                    logger.warning("Could not load library status for %d %s: %s", len(ids), kind, e)
                    continue
                for item, flag in zip(batch, flags):
                    item.in_library = flag
