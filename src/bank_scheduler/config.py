"""Configuration management using pydantic-settings."""

import logging
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SUPPORTED_DATABASE_SCHEMES = (
    "postgresql://",
    "postgresql+asyncpg://",
    "postgresql+psycopg2://",
    "sqlite+aiosqlite://",
)


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class DatabaseSettings(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_", case_sensitive=False)

    url: str = Field(
        default="sqlite+aiosqlite:///./bank_scheduler.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=3600, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL queries (for debugging)")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(_SUPPORTED_DATABASE_SCHEMES):
            raise ValueError(
                "Database URL must start with one of: " + ", ".join(_SUPPORTED_DATABASE_SCHEMES)
            )
        return v

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.url.startswith("sqlite")


class SchedulingSettings(BaseSettings):
    """Appointment scheduling configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULING_", case_sensitive=False)

    default_page_size: int = Field(default=20, ge=1, description="Page size when none is given")
    max_page_size: int = Field(default=100, ge=1, description="Largest page size a query may request")
    slot_lock_enabled: bool = Field(
        default=True,
        description="Serialize check-then-write for the same branch/service/date/time slot",
    )
    slot_lock_timeout_seconds: float = Field(
        default=10.0, gt=0, description="How long to wait for a busy slot lock"
    )


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="bank-scheduler", description="Application name")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Emit logs as JSON lines")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    scheduling: SchedulingSettings = Field(default_factory=SchedulingSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def parse_environment(cls, v):
        """Parse environment from string."""
        if isinstance(v, str):
            try:
                return Environment(v.lower())
            except ValueError:
                return Environment.DEVELOPMENT
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    def validate_production_settings(self) -> None:
        """Validate that production settings are safe."""
        if self.is_production:
            if self.debug:
                raise ValueError("DEBUG must be False in production")
            if self.database.is_sqlite:
                raise ValueError(
                    "SQLite cannot be used in production: slot locking needs PostgreSQL "
                    "advisory locks to hold across processes."
                )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        try:
            _settings.validate_production_settings()
        except ValueError as e:
            logging.error(f"Configuration validation failed: {e}")
            if _settings.is_production:
                raise
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
