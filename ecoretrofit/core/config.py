"""
Configuration management for EcoRetrofit.
"""

from __future__ import annotations

from datetime import date

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Can be configured via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ECORETROFIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Calculation
    current_year: int | None = Field(
        default=None,
        description="Year used for building age (defaults to today's year)",
    )

    # Display
    currency_symbol: str = Field(default="$", description="Prefix for currency amounts")

    # Logging
    log_level: str = Field(default="INFO", description="Console log level")

    @property
    def reference_year(self) -> int:
        """Year against which building age is measured."""
        return self.current_year if self.current_year is not None else date.today().year


# Global settings instance
settings = Settings()
