"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Upper bound on items drained into a client-sorted buffer
MAX_ITEMS = 2000
# Items requested per remote round-trip
FETCH_SIZE = 50
DEFAULT_PAGE_SIZE = 50


def _get_default_preferences_path() -> Path:
    """Get default path to the persisted sort preferences."""
    return Path.home() / ".media-pager" / "sorting.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_PAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote catalog
    api_base_url: str = Field(
        default="https://api.spotify.com/v1",
        description="Base URL of the remote catalog API",
    )
    api_token: str | None = Field(
        default=None,
        description="Bearer token sent with every catalog request",
    )
    request_timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds",
    )

    # Paging
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        description="Items handed to the consumer per local page",
    )
    max_items: int = Field(
        default=MAX_ITEMS,
        ge=1,
        description="Maximum number of items buffered for client-side sorting",
    )
    fetch_size: int = Field(
        default=FETCH_SIZE,
        ge=1,
        description="Items requested per remote call",
    )

    # Retry policy
    retry_max_attempts: int = Field(
        default=3,
        ge=0,
        description="Retries after the first failed remote call",
    )
    retry_base_delay: float = Field(
        default=0.5,
        ge=0,
        description="Initial backoff delay in seconds",
    )
    retry_max_delay: float = Field(
        default=10.0,
        ge=0,
        description="Upper bound for a single backoff delay in seconds",
    )

    # Sort preferences
    preferences_path: Path = Field(
        default_factory=_get_default_preferences_path,
        description="JSON file holding per-source sort preferences",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get application settings (cached singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
