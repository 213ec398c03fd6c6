"""Media Pager CLI - browse remote catalog listings with client-side sorting."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .data.models import MediaObject, SortParams
from .pagers.client_sort import ClientSortPager
from .preferences import SortPreferenceStore
from .remote.client import CatalogClient

console = Console()

cli = typer.Typer(
    name="media-pager",
    help="Media Pager - browse remote catalog listings with client-side sorting.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_ORDERS = {"asc": 1, "desc": -1}


@cli.callback()
def main() -> None:
    """Configure logging for every command."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _sort_order(order: str) -> int:
    try:
        return _ORDERS[order.lower()]
    except KeyError:
        raise typer.BadParameter("order must be 'asc' or 'desc'") from None


def _format_added(added_at: int | None) -> str:
    if not added_at:
        return ""
    return datetime.fromtimestamp(added_at / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def _row(index: int, item: MediaObject) -> list[str]:
    artist = getattr(item, "artist", None) or ""
    return [str(index), item.title, artist, item.item_type.name.lower(), _format_added(item.added_at)]


def output_json(data: Any) -> None:
    """Output data as JSON (plain text, no Rich formatting)."""
    print(json.dumps(data, indent=2, default=str))


async def _browse(
    path: str, sort_id: str, page_size: int, pages: int
) -> tuple[list[MediaObject], int]:
    store = SortPreferenceStore()
    async with CatalogClient() as client:
        pager = ClientSortPager(
            client.page_fetcher(path),
            sort_id=sort_id,
            options={"page_size": page_size, "passive": True},
            preferences=store,
        )
        try:
            for _ in range(pages):
                await pager.fetch_next()
                if pager.at_end:
                    break
        finally:
            pager.disconnect()
        return list(pager.items), pager.size


@cli.command()
def browse(
    path: Annotated[str, typer.Argument(help="Catalog endpoint, e.g. /me/tracks")],
    sort_by: Annotated[str | None, typer.Option("--sort-by", "-s", help="Sort key")] = None,
    order: Annotated[str, typer.Option("--order", "-o", help="asc or desc")] = "asc",
    source: Annotated[
        str | None, typer.Option("--source", help="Preference key (defaults to PATH)")
    ] = None,
    page_size: Annotated[int, typer.Option("--page-size", "-n", min=1)] = 50,
    pages: Annotated[int, typer.Option("--pages", "-p", min=1, help="Pages to show")] = 1,
    as_json: Annotated[bool, typer.Option("--json", help="Output JSON")] = False,
) -> None:
    """Fetch a listing, sort it locally and print the first pages."""
    sort_id = source or path
    if sort_by:
        SortPreferenceStore().set_preference(
            sort_id, SortParams(sort_by=sort_by, sort_order=_sort_order(order))
        )

    items, total = asyncio.run(_browse(path, sort_id, page_size, pages))

    if as_json:
        output_json(
            {
                "items": [item.model_dump(mode="json") for item in items],
                "count": len(items),
                "total": total,
            }
        )
        return

    if not items:
        console.print("[dim]No items[/]")
        return

    table = Table(title=f"{path} ({len(items)} of {total})")
    for column in ("#", "Title", "Artist", "Type", "Added"):
        table.add_column(column)
    for index, item in enumerate(items, start=1):
        table.add_row(*_row(index, item))
    console.print(table)


@cli.command()
def sort(
    source_id: Annotated[str, typer.Argument(help="Preference key of the listing")],
    key: Annotated[str | None, typer.Argument(help="Sort key, e.g. title or added_at")] = None,
    order: Annotated[str, typer.Option("--order", "-o", help="asc or desc")] = "asc",
    clear: Annotated[bool, typer.Option("--clear", help="Remove the preference")] = False,
) -> None:
    """Show, set or clear the persisted sort preference of a listing."""
    store = SortPreferenceStore()

    if clear:
        store.set_preference(source_id, None)
        console.print(f"Cleared sorting for [bold]{source_id}[/]")
        return

    if key is None:
        current = store.get_preference(source_id)
        if current is None:
            console.print(f"[dim]{source_id}: remote order[/]")
        else:
            direction = "asc" if current.sort_order == 1 else "desc"
            console.print(f"{source_id}: {current.sort_by} {direction}")
        return

    params = SortParams(sort_by=key, sort_order=_sort_order(order))
    store.set_preference(source_id, params)
    console.print(f"Sorting [bold]{source_id}[/] by {params.sort_by} ({order.lower()})")

