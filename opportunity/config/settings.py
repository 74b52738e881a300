"""
Engine settings.

Loads configuration from environment variables using pydantic-settings.
Variables are prefixed with OPPORTUNITY_, e.g. OPPORTUNITY_LOG_LEVEL.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class OpportunitySettings(BaseSettings):
    """Settings loaded from environment variables."""

    environment: Literal["development", "production", "test"] = "development"

    # Logging
    log_level: str = "INFO"
    log_file: str | None = Field(
        default="logs/opportunity.log",
        description="Path of the rotating log file, None disables the file sink",
    )
    log_rotation: str = "1 day"
    log_retention: str = "7 days"
    log_to_stderr: bool = False

    model_config = SettingsConfigDict(
        env_prefix="OPPORTUNITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check loguru level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of {', '.join(LOG_LEVELS)}"
            )
        return level

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


# Global settings instance
settings = OpportunitySettings()
