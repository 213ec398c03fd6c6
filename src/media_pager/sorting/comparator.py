"""Type-aware, direction-aware value comparison."""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime, time
from typing import Any

_DIGITS_RE = re.compile(r"(\d+)")


def _fold(text: str) -> str:
    """Strip accents and case so only base letters are compared."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def natural_key(text: str) -> tuple[tuple[int, int, str], ...]:
    """Build a sort key where digit runs compare by numeric value.

    Digit runs sort before letters, so ``"track9" < "track10"`` and
    ``"2 Unlimited" < "ABBA"``.
    """
    key: list[tuple[int, int, str]] = []
    for index, part in enumerate(_DIGITS_RE.split(_fold(text))):
        if index % 2:
            # Digits rank below every letter and punctuation compares by code
            # point, so the order differs from ICU collation for symbols.
            key.append((0, int(part), ""))
        elif part:
            key.append((1, 0, part))
    return tuple(key)


def locale_compare(a: str, b: str) -> int:
    """Case-insensitive, accent-insensitive, numeric-aware string comparison."""
    key_a, key_b = natural_key(a), natural_key(b)
    return (key_a > key_b) - (key_a < key_b)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _instant(value: date) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return datetime.combine(value, time()).timestamp()


def compare_values(a: Any, b: Any, sort_order: int) -> float:
    """Compare two sort values, scaled by ``sort_order`` (1 asc, -1 desc).

    None ranks below any other value before the direction is applied, so
    descending order pushes None to the end.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return -sort_order
    if b is None:
        return sort_order

    if isinstance(a, str) and isinstance(b, str):
        return sort_order * locale_compare(a, b)

    if _is_number(a) and _is_number(b):
        return sort_order * (a - b)

    if isinstance(a, date) and isinstance(b, date):
        return sort_order * (_instant(a) - _instant(b))

    return sort_order * locale_compare(str(a or ""), str(b or ""))
