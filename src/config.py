"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CollectionSettings(BaseModel):
    """One media collection backed by a directory on disk."""

    name: str
    id: str | None = None
    type: Literal["movies", "shows"]
    directory: str


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_env: Literal["development", "production", "test"] = "development"
    app_name: str = "Jellofin"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None

    # Server identity as reported to clients
    server_id: str = "2b1ec0a52b09456c9823a367d84ac9e5"
    server_name: str = "Jellofin"

    # Database
    database_url: str = "sqlite+aiosqlite:///./jellofin.db"

    # Media library
    collections: list[CollectionSettings] = []

    # Users
    auto_register: bool = False

    # Images
    image_quality_poster: int = 90
    image_cache_dir: str = "./cache/images"

    # QuickConnect
    quickconnect_enabled: bool = False

    @field_validator("image_quality_poster")
    @classmethod
    def validate_image_quality(cls, v: int) -> int:
        """Ensure JPEG quality is within the range Pillow accepts."""
        if not 1 <= v <= 100:
            raise ValueError("IMAGE_QUALITY_POSTER must be between 1 and 100")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
