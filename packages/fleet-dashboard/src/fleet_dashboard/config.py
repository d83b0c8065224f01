from functools import lru_cache

from pydantic import Field, field_validator

from shared.config import BaseSettings, api_token_field, api_url_field

from .pagination import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS


class DashboardSettings(BaseSettings):
    """Fleet dashboard configuration."""

    api_url: str = api_url_field(env="DASHBOARD_API_URL")
    api_token: str | None = api_token_field(env="DASHBOARD_API_TOKEN")

    request_timeout: float = Field(
        default=10.0,
        gt=0,
        alias="DASHBOARD_REQUEST_TIMEOUT",
        description="Backend request timeout in seconds",
    )
    items_per_page: int = Field(
        default=DEFAULT_PAGE_SIZE,
        alias="DASHBOARD_ITEMS_PER_PAGE",
        description=f"Initial page size, one of {PAGE_SIZE_OPTIONS}",
    )
    bulk_concurrency: int = Field(
        default=1,
        ge=1,
        alias="DASHBOARD_BULK_CONCURRENCY",
        description="Parallel requests during bulk delete (1 = sequential)",
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("DASHBOARD_API_URL must not be empty")
        return v.rstrip("/")

    @field_validator("items_per_page")
    @classmethod
    def validate_items_per_page(cls, v: int) -> int:
        if v not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Invalid page size: {v}. Must be one of {PAGE_SIZE_OPTIONS}")
        return v


@lru_cache
def get_settings() -> DashboardSettings:
    return DashboardSettings()
