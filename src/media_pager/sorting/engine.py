"""In-place sorting of a client-side buffer."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any

from ..data.models import ItemType, SortParams
from .comparator import compare_values
from .values import get_property_value


def is_artist_added_at_sort(items: list[Any], sort_by: str) -> bool:
    """True when sorting artist rows by ``added_at``.

    The catalog already returns followed artists newest first and artist
    rows carry no reliable ``added_at``, so such a sort is a reversal.
    """
    return (
        sort_by == "added_at"
        and len(items) > 0
        and getattr(items[0], "item_type", None) == ItemType.ARTIST
    )


def compare_items(a: Any, b: Any, sort_params: SortParams) -> float:
    """Compare two domain objects under ``sort_params``."""
    value_a = get_property_value(a, sort_params.sort_by)
    value_b = get_property_value(b, sort_params.sort_by)
    return compare_values(value_a, value_b, sort_params.sort_order)


def apply_sorting(items: list[Any], sort_params: SortParams) -> None:
    """Reorder ``items`` in place according to ``sort_params``."""
    if is_artist_added_at_sort(items, sort_params.sort_by):
        if sort_params.sort_order == 1:
            items.reverse()
        return

    items.sort(key=cmp_to_key(lambda a, b: compare_items(a, b, sort_params)))
