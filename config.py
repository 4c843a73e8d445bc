"""Configuration management via pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Discord
    discord_bot_token: str = ""
    discord_admin_user_id: int | None = None

    # Google Sheets
    google_api_key: str | None = None
    sheet_id: str | None = None
    sheet_range: str = "A1:Z1000"
    sheets_endpoint: str = "https://sheets.googleapis.com/v4/spreadsheets"
    sheets_timeout_seconds: float = 15.0

    # Caching
    cache_ttl_seconds: float = 30.0
    snapshot_max_entries: int = 50
    database_path: Path = Field(default=Path("./data/directory.db"))

    # Search engine
    group_item_limit: int = 10
    suggestion_limit: int = 3
    subcategory_limit: int = 3

    # Scheduling
    refresh_interval_minutes: int = 10

    # Logging
    log_level: str = "INFO"


settings = Settings()
