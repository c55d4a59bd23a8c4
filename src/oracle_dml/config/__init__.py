"""Configuration management module."""

from oracle_dml.config.settings import (
    DatabaseConfig,
    ObservabilityConfig,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "DatabaseConfig",
    "ObservabilityConfig",
    "Settings",
    "get_settings",
    "reset_settings",
]
