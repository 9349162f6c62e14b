"""Configuration settings for carematch."""

from enum import Enum
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OutputFormat(str, Enum):
    """How the CLI renders match results."""

    TEXT = "text"
    JSON = "json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables with `CAREMATCH_` prefix or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CAREMATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ranking
    max_workers: Annotated[int, Field(gt=0)] | None = Field(
        default=None,
        description="Thread pool size for scoring a candidate pool (None = sequential)",
    )
    default_limit: Annotated[int, Field(gt=0)] = Field(
        default=20,
        description="Number of ranked candidates the CLI prints by default",
    )

    # Output
    output_format: OutputFormat = Field(
        default=OutputFormat.TEXT,
        description="CLI output format: 'text' or 'json'",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )

    @field_validator("output_format", mode="before")
    @classmethod
    def validate_output_format(cls, v: str | OutputFormat) -> OutputFormat:
        """Convert string output format to OutputFormat enum."""
        if isinstance(v, OutputFormat):
            return v
        if isinstance(v, str):
            value = v.lower().strip()
            if value == "text":
                return OutputFormat.TEXT
            if value == "json":
                return OutputFormat.JSON
            raise ValueError(f"Invalid output format: {v}. Must be 'text' or 'json'")
        raise ValueError(f"Invalid output format type: {type(v)}")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


# Singleton instance for easy import
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
