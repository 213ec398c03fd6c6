"""Convert raw catalog items into domain objects."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from .models import MediaAlbum, MediaArtist, MediaItem, MediaObject, MediaPlaylist

logger = logging.getLogger(__name__)

# Raw type tag identifying an artist entry
ARTIST_ITEM_TYPE = "artist"

# Keys under which saved-library wrappers nest the actual entry
_WRAPPED_KEYS = ("track", "episode", "album", "show")


def _parse_added_at(value: str | None) -> int | None:
    """Parse an ISO-8601 timestamp into epoch milliseconds."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable added_at value: %r", value)
        return None
    return int(parsed.timestamp() * 1000)


def _parse_year(release_date: str | None) -> int | None:
    """Extract the year from a ``YYYY[-MM[-DD]]`` release date."""
    if not release_date:
        return None
    head = release_date[:4]
    return int(head) if head.isdigit() else None


def _best_image(images: list[dict[str, Any]] | None) -> str | None:
    """Pick the largest image url."""
    if not images:
        return None
    best = max(images, key=lambda image: image.get("width") or 0)
    url: str | None = best.get("url")
    return url


def _artist_names(artists: list[dict[str, Any]] | None) -> str | None:
    names = [artist["name"] for artist in artists or [] if artist.get("name")]
    return ", ".join(names) or None


def unwrap(raw: dict[str, Any]) -> tuple[dict[str, Any], int | None]:
    """Split a saved-library wrapper into the entry and its ``added_at`` time."""
    for key in _WRAPPED_KEYS:
        inner = raw.get(key)
        if isinstance(inner, dict) and "type" not in raw:
            return inner, _parse_added_at(raw.get("added_at"))
    return raw, _parse_added_at(raw.get("added_at"))


def _common(raw: dict[str, Any], added_at: int | None, in_library: bool | None) -> dict[str, Any]:
    return {
        "src": raw.get("uri") or f"catalog:{raw.get('type', 'unknown')}:{raw.get('id', '')}",
        "title": raw.get("name") or "",
        "external_url": (raw.get("external_urls") or {}).get("spotify"),
        "added_at": added_at,
        "in_library": in_library,
        "popularity": raw.get("popularity"),
    }


def _create_artist(raw: dict[str, Any], added_at: int | None, in_library: bool | None) -> MediaArtist:
    return MediaArtist(
        **_common(raw, added_at, in_library),
        thumbnail=_best_image(raw.get("images")),
        genres=raw.get("genres") or [],
        followers=(raw.get("followers") or {}).get("total"),
    )


def create_media_object(raw: dict[str, Any], in_library: bool | None = None) -> MediaObject:
    """Map a raw catalog entry onto the matching domain variant.

    Args:
        raw: Raw item as returned by the catalog, optionally wrapped in a
            saved-library envelope (``{"added_at": ..., "track": {...}}``)
        in_library: Library flag to stamp on the object (None means unknown)
    """
    entry, added_at = unwrap(raw)
    kind = entry.get("type")

    if kind == ARTIST_ITEM_TYPE:
        return _create_artist(entry, added_at, in_library)

    if kind == "album":
        return MediaAlbum(
            **_common(entry, added_at, in_library),
            thumbnail=_best_image(entry.get("images")),
            artist=_artist_names(entry.get("artists")),
            year=_parse_year(entry.get("release_date")),
            track_count=entry.get("total_tracks"),
        )

    if kind == "playlist":
        owner = entry.get("owner") or {}
        return MediaPlaylist(
            **_common(entry, added_at, in_library),
            thumbnail=_best_image(entry.get("images")),
            owner=owner.get("display_name") or owner.get("id"),
            track_count=(entry.get("tracks") or {}).get("total"),
        )

    album = entry.get("album") or {}
    duration_ms = entry.get("duration_ms")
    return MediaItem(
        **_common(entry, added_at, in_library),
        media_type="episode" if kind == "episode" else "track",
        thumbnail=_best_image(album.get("images") or entry.get("images")),
        artist=_artist_names(entry.get("artists")),
        album_artist=_artist_names(album.get("artists")),
        album=album.get("name"),
        duration=duration_ms / 1000 if duration_ms else None,
        track=entry.get("track_number"),
        disc=entry.get("disc_number"),
        year=_parse_year(album.get("release_date") or entry.get("release_date")),
        explicit=entry.get("explicit"),
    )


def create_sortable_media_artist(
    raw: dict[str, Any], in_library: bool | None, secondary_sort_id: str
) -> MediaArtist:
    """Map a raw artist entry, carrying ``secondary_sort_id`` for tie-breaking."""
    entry, added_at = unwrap(raw)
    artist = _create_artist(entry, added_at, in_library)
    artist.secondary_sort_id = secondary_sort_id
    return artist
