"""Tests for value extraction, comparison and the sort engine."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import cmp_to_key

import pytest

from media_pager.data.models import MediaAlbum, MediaArtist, MediaItem, SortParams
from media_pager.sorting import (
    apply_sorting,
    compare_values,
    get_property_value,
    is_artist_added_at_sort,
    locale_compare,
)


def _items(*titles: str) -> list[MediaItem]:
    return [MediaItem(src=f"spotify:track:{title}", title=title) for title in titles]


def _artists(*titles: str) -> list[MediaArtist]:
    return [MediaArtist(src=f"spotify:artist:{title}", title=title) for title in titles]


def _sorted(values: list[object], sort_order: int) -> list[object]:
    return sorted(values, key=cmp_to_key(lambda a, b: compare_values(a, b, sort_order)))


# ============================================================================
# Comparator
# ============================================================================


class TestCompareValues:
    """Tests for compare_values."""

    def test_numeric_substrings_compare_by_value(self) -> None:
        """track9 should sort before track10."""
        assert compare_values("track9", "track10", 1) < 0
        assert compare_values("track9", "track10", -1) > 0

    def test_strings_ignore_case_and_accents(self) -> None:
        """Comparison is at base-letter strength."""
        assert compare_values("abba", "ABBA", 1) == 0
        assert compare_values("Beyoncé", "beyonce", 1) == 0

    def test_none_ranks_lowest_before_direction(self) -> None:
        """None sorts first ascending and last descending."""
        values = ["b", None, "a"]
        assert _sorted(values, 1) == [None, "a", "b"]
        assert _sorted(values, -1) == ["b", "a", None]

    def test_none_against_none_is_equal(self) -> None:
        assert compare_values(None, None, 1) == 0

    def test_none_before_numbers_and_dates(self) -> None:
        """The None rule applies to every comparable type."""
        assert compare_values(None, 0, 1) < 0
        assert compare_values(None, datetime(2024, 1, 1), 1) < 0

    def test_numbers_compare_by_difference(self) -> None:
        assert compare_values(3, 10, 1) == -7
        assert compare_values(3, 10, -1) == 7

    def test_dates_compare_by_instant(self) -> None:
        earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)
        later = datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert compare_values(earlier, later, 1) < 0
        assert compare_values(earlier, later, -1) > 0

    def test_mixed_types_compare_as_strings(self) -> None:
        """10 vs "9" falls back to numeric-aware string comparison."""
        assert compare_values(10, "9", 1) > 0
        assert compare_values(True, "false", 1) > 0

    def test_falsy_mixed_value_stringifies_empty(self) -> None:
        """0 against a string compares as the empty string."""
        assert compare_values(0, "a", 1) < 0

    def test_locale_compare_digits_before_letters(self) -> None:
        assert locale_compare("2 Unlimited", "ABBA") < 0
        assert locale_compare("", "a") < 0

    def test_locale_compare_punctuation_uses_code_points(self) -> None:
        assert locale_compare("_x", "a") < 0
        assert locale_compare("~x", "a") > 0


# ============================================================================
# Value extraction
# ============================================================================


class TestGetPropertyValue:
    """Tests for get_property_value fallbacks."""

    def test_title_and_name_keys(self) -> None:
        item = MediaItem(src="x", title="Song")
        assert get_property_value(item, "title") == "Song"
        assert get_property_value(item, "name") == "Song"

    def test_empty_title_falls_back_to_empty_string(self) -> None:
        assert get_property_value(MediaItem(src="x"), "title") == ""

    def test_artist_falls_back_to_album_artist(self) -> None:
        item = MediaItem(src="x", album_artist="Various")
        assert get_property_value(item, "artist") == "Various"
        assert get_property_value(MediaItem(src="x"), "artist") == ""

    def test_artist_key_on_artist_rows_is_empty(self) -> None:
        assert get_property_value(MediaArtist(src="x", title="Björk"), "artist") == ""

    def test_added_at_spellings(self) -> None:
        item = MediaItem(src="x", added_at=1234)
        assert get_property_value(item, "added_at") == 1234
        assert get_property_value(item, "addedAt") == 1234
        assert get_property_value(MediaItem(src="x"), "addedAt") == 0

    def test_other_keys_accept_aliases(self) -> None:
        album = MediaAlbum(src="x", track_count=12)
        assert get_property_value(album, "track_count") == 12
        assert get_property_value(album, "trackCount") == 12

    def test_other_key_fallbacks(self) -> None:
        """Zero stays numeric, missing values become empty strings."""
        assert get_property_value(MediaItem(src="x", popularity=0), "popularity") == 0
        assert get_property_value(MediaItem(src="x"), "popularity") == ""
        assert get_property_value(MediaItem(src="x"), "no_such_field") == ""


# ============================================================================
# Sort engine
# ============================================================================


class TestApplySorting:
    """Tests for apply_sorting."""

    def test_sort_by_title_ascending(self) -> None:
        items = _items("b", "a", "c")
        apply_sorting(items, SortParams(sort_by="title", sort_order=1))
        assert [item.title for item in items] == ["a", "b", "c"]

    def test_sort_by_title_descending(self) -> None:
        items = _items("b", "a", "c")
        apply_sorting(items, SortParams(sort_by="title", sort_order=-1))
        assert [item.title for item in items] == ["c", "b", "a"]

    def test_sort_is_in_place(self) -> None:
        items = _items("b", "a")
        original = items
        apply_sorting(items, SortParams(sort_by="title"))
        assert items is original

    def test_sort_numeric_titles(self) -> None:
        items = _items("track10", "track9", "Track1")
        apply_sorting(items, SortParams(sort_by="title"))
        assert [item.title for item in items] == ["Track1", "track9", "track10"]

    def test_sort_by_added_at_for_tracks(self) -> None:
        items = [
            MediaItem(src="a", title="old", added_at=1),
            MediaItem(src="b", title="new", added_at=3),
            MediaItem(src="c", title="mid", added_at=2),
        ]
        apply_sorting(items, SortParams(sort_by="added_at", sort_order=-1))
        assert [item.title for item in items] == ["new", "mid", "old"]

    def test_sort_params_accept_aliases(self) -> None:
        params = SortParams.model_validate({"sortBy": "title", "sortOrder": -1})
        items = _items("a", "b")
        apply_sorting(items, params)
        assert [item.title for item in items] == ["b", "a"]


class TestArtistAddedAtSort:
    """Artist rows sorted by added_at are reversed, never compared."""

    def test_ascending_reverses(self) -> None:
        items = _artists("newest", "middle", "oldest")
        apply_sorting(items, SortParams(sort_by="added_at", sort_order=1))
        assert [item.title for item in items] == ["oldest", "middle", "newest"]

    def test_descending_keeps_remote_order(self) -> None:
        items = _artists("newest", "middle", "oldest")
        apply_sorting(items, SortParams(sort_by="added_at", sort_order=-1))
        assert [item.title for item in items] == ["newest", "middle", "oldest"]

    def test_timestamps_are_not_consulted(self) -> None:
        """Even when artists carry added_at values the buffer is only reversed."""
        items = [
            MediaArtist(src="a", title="a", added_at=1),
            MediaArtist(src="b", title="b", added_at=3),
            MediaArtist(src="c", title="c", added_at=2),
        ]
        apply_sorting(items, SortParams(sort_by="added_at", sort_order=1))
        assert [item.title for item in items] == ["c", "b", "a"]

    def test_detection_uses_type_tag_of_first_item(self) -> None:
        assert is_artist_added_at_sort(_artists("x"), "added_at")
        assert not is_artist_added_at_sort(_items("x"), "added_at")
        assert not is_artist_added_at_sort(_artists("x"), "addedAt")
        assert not is_artist_added_at_sort([], "added_at")

    @pytest.mark.parametrize("sort_order", [1, -1])
    def test_other_keys_use_full_sort(self, sort_order: int) -> None:
        items = _artists("b", "c", "a")
        apply_sorting(items, SortParams(sort_by="title", sort_order=sort_order))
        expected = ["a", "b", "c"] if sort_order == 1 else ["c", "b", "a"]
        assert [item.title for item in items] == expected
