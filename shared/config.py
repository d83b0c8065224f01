"""Base configuration with pydantic-settings.

This module provides a base Settings class that dashboard components inherit from.
Each component defines its own Settings with the fields specific to it.

Usage:
    from shared.config import BaseSettings, api_url_field

    class Settings(BaseSettings):
        api_url: str = api_url_field(env="DASHBOARD_API_URL")

    settings = Settings()
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Base application settings.

    All fields here are optional with sensible defaults.
    Subclasses add the fields they require.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Logging configuration
    service_name: str = Field(
        default="fleet-dashboard",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v


# === Field definitions for reuse in component configs ===


def api_url_field(env: str, required: bool = True):
    """Deployments backend URL field definition."""
    if required:
        return Field(
            ...,
            alias=env,
            description="Deployments backend base URL (including the /api prefix)",
            examples=["http://localhost:3001/api"],
        )
    return Field(
        default=None,
        alias=env,
        description="Deployments backend base URL (optional)",
    )


def api_token_field(env: str):
    """Bearer token field definition. Token issuance is handled elsewhere."""
    return Field(
        default=None,
        alias=env,
        description="Bearer token sent with every backend request (optional)",
    )
