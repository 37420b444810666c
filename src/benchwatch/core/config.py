"""Configuration management for benchwatch.

This module provides configuration classes using pydantic-settings
for environment variable management and validation.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables with
    the BENCHWATCH_ prefix. They provide the defaults of the CLI options.

    Attributes:
        data_file: Path of the JSON benchmark history.
        suite_name: Default benchmark suite name.
        alert_threshold: Ratio at which a measurement raises an alert.
        fail_threshold: Ratio at which a measurement fails (defaults to alert_threshold).
        noise: Relative band around 1.0 reported as "unchanged".
        max_items: Maximum runs kept per suite (None = unlimited).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).

    Example:
        >>> # export BENCHWATCH_ALERT_THRESHOLD=150%
        >>> settings = Settings()
        >>> settings.alert_threshold
        '150%'

    Environment Variables:
        BENCHWATCH_DATA_FILE: History file (default: benchmark-data.json)
        BENCHWATCH_SUITE_NAME: Suite name (default: cargo)
        BENCHWATCH_ALERT_THRESHOLD: Alert threshold (default: 200%)
        BENCHWATCH_FAIL_THRESHOLD: Fail threshold (optional)
        BENCHWATCH_NOISE: Noise band (default: 0.05)
        BENCHWATCH_MAX_ITEMS: Runs kept per suite (optional)
        BENCHWATCH_LOG_LEVEL: Logging level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_prefix="BENCHWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_file: str = Field(
        default="benchmark-data.json",
        description="Path of the JSON benchmark history",
    )
    suite_name: str = Field(
        default="cargo",
        description="Default benchmark suite name",
    )
    alert_threshold: str = Field(
        default="200%",
        description="Alert threshold as a percentage or multiplier",
    )
    fail_threshold: str | None = Field(
        default=None,
        description="Fail threshold as a percentage or multiplier",
    )
    noise: float = Field(
        default=0.05,
        ge=0,
        lt=1,
        description="Relative band around 1.0 treated as unchanged",
    )
    max_items: int | None = Field(
        default=None,
        ge=1,
        description="Maximum runs kept per suite",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
