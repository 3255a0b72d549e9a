"""
Pydantic configuration models for TenderHub.

These models provide type-safe configuration with validation for:
- Database connection
- Logging
- Marketplace defaults (placeholder profile, industry tags, currency)
- Identity resolution for the CLI
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Database Configuration
# =============================================================================


class DatabaseConfig(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite:///data/tenderhub.db",
        description="SQLAlchemy database URL",
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements (debugging)",
    )
    pool_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Connection pool size",
    )


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=Path("logs/tenderhub.log"),
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )

    @field_validator("level")
    @classmethod
    def level_is_known(cls, v: str) -> str:
        """Reject levels the logging module does not know."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


# =============================================================================
# Marketplace Configuration
# =============================================================================


class MarketplaceConfig(BaseModel):
    """Business defaults for profiles, tags and display."""

    placeholder_company_name: str = Field(
        default="My Company",
        min_length=1,
        description="Name given to auto-provisioned company profiles",
    )
    placeholder_industry: str = Field(
        default="Technology",
        min_length=1,
        description="Industry given to auto-provisioned company profiles",
    )
    placeholder_description: str = Field(
        default="Company description",
        min_length=1,
        description="Description given to auto-provisioned company profiles",
    )
    industries: list[str] = Field(
        default_factory=lambda: [
            "Technology",
            "Construction",
            "Healthcare",
            "Finance",
            "Manufacturing",
            "Retail",
        ],
        description="Suggested industry tags (tags stay free-form)",
    )
    currency_symbol: str = Field(
        default="$",
        description="Symbol prefixed to formatted budget amounts",
    )


# =============================================================================
# Identity Configuration
# =============================================================================


class IdentityConfig(BaseModel):
    """How the CLI resolves the acting identity."""

    env_var: str = Field(
        default="TENDERHUB_IDENTITY",
        min_length=1,
        description="Environment variable holding the current identity",
    )


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    # Paths
    config_dir: Path = Field(
        default=Path("configs"),
        description="Configuration directory",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Data storage directory",
    )

    # Components
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    marketplace: MarketplaceConfig = Field(default_factory=MarketplaceConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        for dir_path in [self.config_dir, self.data_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

        # Create logs directory from logging config
        if self.logging.file:
            self.logging.file.parent.mkdir(parents=True, exist_ok=True)
