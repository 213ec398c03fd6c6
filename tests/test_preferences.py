"""Tests for the sort preference store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from media_pager.config import Settings
from media_pager.data.models import SortParams
from media_pager.exceptions import PreferenceStoreError
from media_pager.preferences import SortPreferenceStore, parse_sort_params


class TestSortPreferenceStore:
    """Tests for SortPreferenceStore."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        store = SortPreferenceStore(tmp_path / "none.json")
        assert store.get_preference("any") is None

    def test_round_trips_through_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "prefs" / "sorting.json"
        SortPreferenceStore(path).set_preference(
            "tracks", SortParams(sort_by="title", sort_order=-1)
        )

        data = json.loads(path.read_text())
        assert data == {"version": 1, "sorting": {"tracks": {"sortBy": "title", "sortOrder": -1}}}
        assert SortPreferenceStore(path).get_preference("tracks") == SortParams(
            sort_by="title", sort_order=-1
        )

    def test_clear_removes_entry(self, tmp_path: Path) -> None:
        path = tmp_path / "sorting.json"
        store = SortPreferenceStore(path)
        store.set_preference("tracks", SortParams(sort_by="title"))
        store.set_preference("tracks", None)

        assert store.get_preference("tracks") is None
        assert SortPreferenceStore(path).get_preference("tracks") is None

    def test_default_path_from_settings(self, settings: Settings) -> None:
        SortPreferenceStore().set_preference("x", SortParams(sort_by="title"))
        assert settings.preferences_path.exists()

    def test_corrupted_file_loads_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "sorting.json"
        path.write_text("{not json")
        assert SortPreferenceStore(path).get_preference("tracks") is None

    def test_unknown_version_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "sorting.json"
        path.write_text(json.dumps({"version": 99, "sorting": {"t": {"sortBy": "title"}}}))
        assert SortPreferenceStore(path).get_preference("t") is None

    def test_invalid_entries_are_dropped(self, tmp_path: Path) -> None:
        path = tmp_path / "sorting.json"
        path.write_text(
            json.dumps(
                {
                    "version": 1,
                    "sorting": {
                        "good": {"sortBy": "title", "sortOrder": 1},
                        "bad": {"sortBy": "title", "sortOrder": 5},
                    },
                }
            )
        )
        store = SortPreferenceStore(path)
        assert store.get_preference("good") is not None
        assert store.get_preference("bad") is None

    def test_write_failure_keeps_memory_value(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = SortPreferenceStore(blocker / "sorting.json")

        store.set_preference("tracks", SortParams(sort_by="title"))

        assert store.get_preference("tracks") == SortParams(sort_by="title")

    def test_changes_are_streamed_per_source(self, tmp_path: Path) -> None:
        store = SortPreferenceStore(tmp_path / "sorting.json")
        tracks: list[SortParams | None] = []
        albums: list[SortParams | None] = []
        store.observe_preference_changes("tracks").subscribe(tracks.append)
        store.observe_preference_changes("albums").subscribe(albums.append)

        store.set_preference("tracks", SortParams(sort_by="title"))
        store.set_preference("tracks", None)

        assert tracks == [SortParams(sort_by="title"), None]
        assert albums == []

    def test_same_stream_for_same_source(self, tmp_path: Path) -> None:
        store = SortPreferenceStore(tmp_path / "sorting.json")
        assert store.observe_preference_changes("a") is store.observe_preference_changes("a")


class TestParseSortParams:
    """Tests for parse_sort_params."""

    def test_accepts_aliases_and_names(self) -> None:
        assert parse_sort_params({"sortBy": "title", "sortOrder": -1}).sort_order == -1
        assert parse_sort_params({"sort_by": "artist"}).sort_order == 1

    @pytest.mark.parametrize("raw", [{}, {"sortBy": ""}, {"sortBy": "title", "sortOrder": 0}, 5])
    def test_rejects_invalid(self, raw: object) -> None:
        with pytest.raises(PreferenceStoreError):
            parse_sort_params(raw)
