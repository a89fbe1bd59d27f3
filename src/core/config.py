"""Settings of the StoreConfig service, loaded with pydantic-settings.

Values come from environment variables first, then a ``.env`` file in the
working directory, then the defaults below. Nested sections use ``__`` in
variable names, e.g. ``LOG_CONFIG__LOG_LEVEL=DEBUG`` or
``FISCAL_CONFIG__TAX_DECIMAL_PLACES=4``.

``get_settings`` caches the instance; tests call ``cache_clear`` after
changing the environment.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output format; detected from the environment when unset",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class FiscalConfig(BaseModel):
    """Settings for the fiscal configuration use cases."""

    tax_decimal_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places used when reporting calculated tax amounts",
    )
    default_fiscal_service: Literal["Shopify Tax", "Manual", "Basic Tax"] = Field(
        default="Manual",
        description="Fiscal service assumed when a create command omits it",
    )


class Settings(BaseSettings):
    """Top-level settings; nested sections are pydantic models."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
    )

    # Service identity
    app_name: str = Field(default="StoreConfig", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    fiscal_config: FiscalConfig = Field(
        default_factory=FiscalConfig, description="Fiscal configuration settings"
    )

    def model_post_init(self, __context: object) -> None:
        """Fill in the log formatter when it was not configured."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """JSON on managed platforms and outside development."""
        # Managed container platforms ingest structured logs
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"

        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, built on first use."""
    return Settings()
