"""Configuration management for the outcome registry."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8080)

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )

    # Analytics defaults
    default_time_window: Literal["30d", "90d", "12mo", "all"] = Field(
        default="90d",
        description="Time window used when a request does not specify one",
    )
    default_include_overrides: bool = Field(
        default=False,
        description="Whether override-flagged care targets count toward outcome metrics by default",
    )
    registry_top_reasons: int = Field(
        default=5,
        ge=1,
        description="Number of discharge reasons kept in the resolution distribution",
    )

    # Instrument catalog
    instrument_catalog_path: Optional[Path] = Field(
        default=None,
        description="Optional JSON file of instrument definitions replacing the built-in table",
    )

    # Diagnostics
    diagnostics_log_dir: Optional[Path] = Field(
        default=None,
        description="Directory for JSON Lines diagnostics (disabled when unset)",
    )

    # Debug
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (exposes error details in responses)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    @property
    def has_catalog_file(self) -> bool:
        """Check if an instrument definition file replaces the built-in table."""
        return self.instrument_catalog_path is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
