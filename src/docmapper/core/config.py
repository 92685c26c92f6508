"""Configuration management for DocMapper.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Settings are read once and treated as
immutable by the entity and query layers.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated on construction.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOCMAPPER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "DocMapper"
    environment: Literal["development", "production", "testing"] = "development"

    # Document Store Settings
    database_url: str = "sqlite+aiosqlite:///./dm_data/docmapper.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Query Settings
    filter_conflict_policy: Literal["reject", "last_wins"] = Field(
        default="reject",
        description=(
            "What to do when two And-filters target the same field and cannot "
            "be merged into one range document"
        ),
    )
    default_query_limit: int | None = Field(
        default=None,
        description="Limit applied to queries that never call set_limit (None = unlimited)",
    )

    @field_validator("default_query_limit")
    @classmethod
    def validate_default_query_limit(cls, v: int | None) -> int | None:
        """Reject zero and negative default limits."""
        if v is not None and v < 1:
            raise ValueError("default_query_limit must be a positive integer")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def is_sqlite(self) -> bool:
        """Check if the document store is backed by SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
