"""Pytest configuration and shared fixtures for media-pager tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

import media_pager.config as config_module
from media_pager.config import Settings
from media_pager.preferences import SortPreferenceStore


@pytest.fixture(autouse=True)
def settings(tmp_path: Path) -> Generator[Settings, None, None]:
    """Isolated settings: temp preference file and no retry delays."""
    original = config_module._settings
    config_module._settings = Settings(
        preferences_path=tmp_path / "sorting.json",
        api_base_url="https://catalog.test/v1",
        api_token="test-token",
        retry_max_attempts=2,
        retry_base_delay=0,
        retry_max_delay=0,
    )
    yield config_module._settings
    config_module._settings = original


@pytest.fixture
def store(settings: Settings) -> SortPreferenceStore:
    """Empty sort preference store backed by a temp file."""
    return SortPreferenceStore(settings.preferences_path)
