"""Application configuration management using Pydantic Settings."""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from redev.exceptions import ConfigurationError


class DatabaseType(str, Enum):
    """Backends the store factory recognizes."""

    FILE = "file"
    MONGODB = "mongodb"
    POSTGRES = "postgres"


def default_data_path() -> str:
    """Default root directory for the file backend."""
    return os.path.join(os.getcwd(), "data")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")
    secret_key: str = Field(default="dev-secret-key", alias="SECRET_KEY")

    # Store Configuration
    database_type: str = Field(default="file", alias="DATABASE_TYPE")
    database_file_path: str = Field(
        default_factory=default_data_path, alias="DATABASE_FILE_PATH"
    )
    mongodb_url: Optional[str] = Field(default=None, alias="MONGODB_URL")
    postgres_url: Optional[str] = Field(default=None, alias="POSTGRES_URL")

    # Logging Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="standard", alias="LOG_FORMAT")

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v):
        """Reject the placeholder SECRET_KEY shipped in example env files."""
        if not v or v == "your-secret-key-here-change-in-production":
            raise ValueError("SECRET_KEY must be set to a secure value")
        return v

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v):
        """Validate application environment."""
        allowed_envs = {"development", "testing", "production"}
        if v not in allowed_envs:
            raise ValueError(f"APP_ENV must be one of {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        allowed_formats = {"standard", "json"}
        if v.lower() not in allowed_formats:
            raise ValueError(f"LOG_FORMAT must be one of {allowed_formats}")
        return v.lower()

    @field_validator("database_type")
    @classmethod
    def validate_database_type(cls, v):
        """Validate database type."""
        allowed_types = {t.value for t in DatabaseType}
        if v.lower() not in allowed_types:
            raise ValueError(f"DATABASE_TYPE must be one of {allowed_types}")
        return v.lower()


class DatabaseConfig(BaseModel):
    """Backend selection handed to the store factory."""

    type: DatabaseType = Field(default=DatabaseType.FILE, description="Backend type")
    file_path: Optional[str] = Field(
        default=None, description="Root directory for the file backend"
    )
    url: Optional[str] = Field(
        default=None, description="Connection URL for network backends"
    )


def load_database_config(settings: Optional[Settings] = None) -> DatabaseConfig:
    """
    Build the store backend configuration from settings.

    Args:
        settings: Settings to read from (defaults to the global settings)

    Returns:
        DatabaseConfig: Backend configuration for the store factory

    Raises:
        ConfigurationError: If a network backend is selected without its URL
    """
    if settings is None:
        settings = get_global_settings()

    db_type = DatabaseType(settings.database_type)

    if db_type == DatabaseType.FILE:
        return DatabaseConfig(type=db_type, file_path=settings.database_file_path)

    if db_type == DatabaseType.MONGODB:
        if not settings.mongodb_url:
            raise ConfigurationError(
                "MONGODB_URL environment variable is required when using MongoDB"
            )
        return DatabaseConfig(type=db_type, url=settings.mongodb_url)

    if not settings.postgres_url:
        raise ConfigurationError(
            "POSTGRES_URL environment variable is required when using PostgreSQL"
        )
    return DatabaseConfig(type=db_type, url=settings.postgres_url)


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Get application settings instance."""
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()


# Global settings instance - created on first use
_settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_global_settings() -> None:
    """Reset global settings instance (useful for testing)."""
    global _settings
    _settings = None
