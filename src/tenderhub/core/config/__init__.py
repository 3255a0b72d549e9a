"""Configuration loading and validation."""

from .models import (
    AppConfig,
    DatabaseConfig,
    IdentityConfig,
    LoggingConfig,
    MarketplaceConfig,
)
from .loader import ConfigError, load_app_config, validate_app_config_file

__all__ = [
    # Config models
    "AppConfig",
    "DatabaseConfig",
    "IdentityConfig",
    "LoggingConfig",
    "MarketplaceConfig",
    # Loaders
    "ConfigError",
    "load_app_config",
    "validate_app_config_file",
]
