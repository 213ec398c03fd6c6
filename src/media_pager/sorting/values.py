"""Map sort keys onto domain object fields."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def _field(obj: Any, key: str) -> Any:
    """Read ``key`` from ``obj``, accepting either a field name or its alias."""
    if isinstance(obj, BaseModel):
        for name, info in type(obj).model_fields.items():
            if key == name or key == info.alias:
                return getattr(obj, name)
    return getattr(obj, key, None)


def get_property_value(obj: Any, key: str) -> Any:
    """Get the value ``obj`` is sorted by for ``key``.

    Never returns a missing value: text keys fall back to ``""`` and
    timestamps to ``0``.
    """
    if key in ("title", "name"):
        return _field(obj, "title") or _field(obj, "name") or ""
    if key == "artist":
        return _field(obj, "artist") or _field(obj, "album_artist") or ""
    if key in ("addedAt", "added_at"):
        return _field(obj, "added_at") or 0

    value = _field(obj, key)
    if value:
        return value
    return 0 if isinstance(value, (int, float)) and not isinstance(value, bool) else ""
