"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Equipment Tracker"
    app_version: str = "1.0.0"
    database_url: str = "sqlite:///equipment_tracker.db"
    sql_echo: bool = False
    # Seconds between refreshes of the watch command
    refresh_interval_seconds: float = 5.0
    export_filename_prefix: str = "fire-dept-equipment"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

__all__ = ["settings", "Settings"]
