"""Configuration management for oracle-dml-common.

Settings are loaded from environment variables (and an optional ``.env``
file) using pydantic-settings.
"""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Default connection used by the command line."""

    model_config = SettingsConfigDict(env_prefix="ORACLE_DML_DB_")

    conn_string: SecretStr = Field(
        default=SecretStr(""),
        description="Connection descriptor: usr/pwd@db[:approle/rolepwd] or a CSV directory",
    )
    db_type: str = Field(default="Oracle", description="Database type: Oracle, CSV, ODBC")
    flat_file_pattern: str = Field(
        default="*.csv", description="Glob of files exposed as tables for the CSV type"
    )

    @field_validator("db_type")
    @classmethod
    def default_db_type(cls, v: str) -> str:
        """Treat a blank database type as Oracle."""
        return v.strip() or "Oracle"


class ObservabilityConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="ORACLE_DML_OBSERVABILITY_")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: Literal["json", "text"] = Field(default="text", description="Log format")


class Settings(BaseSettings):
    """Main settings aggregating all config sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance.

    Returns:
        Settings: The global settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset global settings instance. Useful for testing."""
    global _settings
    _settings = None
