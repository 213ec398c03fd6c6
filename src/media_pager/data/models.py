"""Domain objects and paging payloads."""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field


class ItemType(IntEnum):
    """Discriminant carried by every domain object."""

    ALBUM = 1
    ARTIST = 2
    MEDIA = 3
    PLAYLIST = 4


class _MediaBase(BaseModel):
    """Fields shared by every catalog entry."""

    model_config = ConfigDict(populate_by_name=True)

    src: str
    title: str = ""
    external_url: str | None = Field(default=None, alias="externalUrl")
    thumbnail: str | None = None
    added_at: int | None = Field(default=None, alias="addedAt")  # epoch ms
    in_library: bool | None = Field(default=None, alias="inLibrary")
    popularity: int | None = None

    @property
    def remote_id(self) -> str:
        """Trailing id segment of a ``service:kind:id`` uri."""
        return self.src.rsplit(":", 1)[-1]


class MediaItem(_MediaBase):
    """A playable track or episode."""

    item_type: Literal[ItemType.MEDIA] = Field(default=ItemType.MEDIA, alias="itemType")
    media_type: Literal["track", "episode"] = Field(default="track", alias="mediaType")
    artist: str | None = None
    album_artist: str | None = Field(default=None, alias="albumArtist")
    album: str | None = None
    duration: float | None = None  # seconds
    track: int | None = None
    disc: int | None = None
    year: int | None = None
    explicit: bool | None = None


class MediaAlbum(_MediaBase):
    """An album or single."""

    item_type: Literal[ItemType.ALBUM] = Field(default=ItemType.ALBUM, alias="itemType")
    artist: str | None = None
    year: int | None = None
    track_count: int | None = Field(default=None, alias="trackCount")


class MediaArtist(_MediaBase):
    """An artist row; ``secondary_sort_id`` breaks ties in artist listings."""

    item_type: Literal[ItemType.ARTIST] = Field(default=ItemType.ARTIST, alias="itemType")
    genres: list[str] = Field(default_factory=list)
    followers: int | None = None
    secondary_sort_id: str | None = Field(default=None, alias="secondarySortId")


class MediaPlaylist(_MediaBase):
    """A user or editorial playlist."""

    item_type: Literal[ItemType.PLAYLIST] = Field(default=ItemType.PLAYLIST, alias="itemType")
    owner: str | None = None
    track_count: int | None = Field(default=None, alias="trackCount")


MediaObject = Annotated[
    Union[MediaItem, MediaAlbum, MediaArtist, MediaPlaylist],
    Field(discriminator="item_type"),
]

MEDIA_OBJECT_TYPES: tuple[type[_MediaBase], ...] = (MediaItem, MediaAlbum, MediaArtist, MediaPlaylist)

T = TypeVar("T")


class SortParams(BaseModel):
    """Sort specification: a key plus a direction (1 ascending, -1 descending)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sort_by: str = Field(alias="sortBy", min_length=1)
    sort_order: Literal[1, -1] = Field(default=1, alias="sortOrder")


class RemotePage(BaseModel):
    """One page as returned by the remote catalog."""

    items: list[Any] = Field(default_factory=list)  # malformed entries are dropped by the pager
    next: str | None = None
    total: int | None = None


class PageResult(BaseModel, Generic[T]):
    """Result of a local page request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[T] = Field(default_factory=list)
    total: int = 0
    at_end: bool = True


def is_media_field(name: str) -> bool:
    """True when ``name`` is a field or alias on any domain object variant."""
    for model in MEDIA_OBJECT_TYPES:
        for field_name, info in model.model_fields.items():
            if name in (field_name, info.alias):
                return True
    return False
