"""Client-side sorting of buffered catalog items."""

from .comparator import compare_values, locale_compare
from .engine import apply_sorting, compare_items, is_artist_added_at_sort
from .values import get_property_value

__all__ = [
    "apply_sorting",
    "compare_items",
    "compare_values",
    "get_property_value",
    "is_artist_added_at_sort",
    "locale_compare",
]
