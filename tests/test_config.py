"""Tests for settings loading."""

from __future__ import annotations

import pytest

import media_pager.config as config_module
from media_pager.config import FETCH_SIZE, MAX_ITEMS, Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults_match_core_constants(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MEDIA_PAGER_MAX_ITEMS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.max_items == MAX_ITEMS == 2000
        assert settings.fetch_size == FETCH_SIZE == 50
        assert settings.page_size == 50

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MEDIA_PAGER_PAGE_SIZE", "25")
        assert Settings(_env_file=None).page_size == 25

    def test_get_settings_is_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config_module, "_settings", None)
        assert get_settings() is get_settings()
