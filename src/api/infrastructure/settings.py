"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings for the PostgreSQL storage backend.

    Environment variables:
        MEMBERSHIP_DB_HOST: Database host (default: localhost)
        MEMBERSHIP_DB_PORT: Database port (default: 5432)
        MEMBERSHIP_DB_DATABASE: Database name (default: membership)
        MEMBERSHIP_DB_USERNAME: Database user (default: membership)
        MEMBERSHIP_DB_PASSWORD: Database password (required in production)
        MEMBERSHIP_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        MEMBERSHIP_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMBERSHIP_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="membership", description="Database name")
    username: str = Field(default="membership", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self


class Settings(BaseSettings):
    """Main application settings.

    Environment variables:
        MEMBERSHIP_APP_NAME: Application name
        MEMBERSHIP_DEBUG: Debug mode (default: false)
        MEMBERSHIP_LOG_LEVEL: Minimum log level (default: INFO)
        MEMBERSHIP_STORAGE_BACKEND: "memory" or "postgres" (default: memory)
        MEMBERSHIP_GROUP_NAME_MAX_LENGTH: Longest accepted group name (default: 35)
        MEMBERSHIP_IDENTIFIER_LENGTH: Length of group and user ids (default: 24)
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMBERSHIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Membership Service", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    storage_backend: Literal["memory", "postgres"] = Field(
        default="memory", description="Storage gateway implementation"
    )
    group_name_max_length: int = Field(
        default=35,
        description="Maximum length of a group name",
        ge=1,
        le=255,
    )
    identifier_length: int = Field(
        default=24,
        description="Exact length of group and user identifiers",
        ge=1,
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()
