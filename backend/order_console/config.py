"""Order Console: application configuration via pydantic-settings."""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Digital Manufacturing public API (host supplies base path and credentials)
    DM_API_BASE_URL: str = "http://localhost:8080"
    DM_API_TOKEN: Optional[str] = None
    DM_API_TIMEOUT_SECONDS: float = 30.0

    # Used when the caller does not send an X-Plant header
    DEFAULT_PLANT: str = ""

    # Order search
    ORDER_LIST_PAGE_SIZE: int = 200
    MATERIAL_MANDATORY: bool = False
    REQUIRE_SEARCH_DIMENSION: bool = True

    # Row enrichment / selection
    ENRICHABLE_STATUSES: List[str] = ["ACTIVE", "NOT_IN_EXECUTION"]
    ENABLED_STATUSES: List[str] = ["ACTIVE", "NOT_IN_EXECUTION"]
    ENRICHMENT_CONCURRENCY: int = 8

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
