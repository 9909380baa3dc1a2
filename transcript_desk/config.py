"""
Configuration settings for the transcript desk.

Uses Pydantic Settings to load environment variables for the database location,
the change-overlay storage, export destinations, logging and view defaults.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    database_path: str = Field("flask_app.db", alias="DATABASE_PATH")
    focal_table: str = Field("podcasts", alias="FOCAL_TABLE")
    load_retry_attempts: int = Field(3, alias="LOAD_RETRY_ATTEMPTS")

    # Change overlay storage
    overlay_key: str = Field("podcastTranscriptChanges", alias="OVERLAY_KEY")
    storage_path: str = Field(".transcript_desk/storage.json", alias="STORAGE_PATH")

    # Exports
    export_dir: str = Field("exports", alias="EXPORT_DIR")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    # View defaults
    default_page_size: int = Field(10, alias="DEFAULT_PAGE_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
