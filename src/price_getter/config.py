"""Application configuration using Pydantic Settings.

Every setting can be overridden by an environment variable of the same name;
environment variables take precedence over values in ``.env``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from price_getter.auth import DEFAULT_SCOPE
from price_getter.cache import DEFAULT_LOCATION_TTL, DEFAULT_TOKEN_EXPIRY_MARGIN
from price_getter.client import DEFAULT_TIMEOUT, KROGER_API_BASE_URL
from price_getter.products import SearchFilter


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
    )

    # Kroger API
    KROGER_CLIENT_ID: str = ""
    KROGER_CLIENT_SECRET: str = ""
    KROGER_DEFAULT_SCOPE: str = DEFAULT_SCOPE
    KROGER_API_BASE_URL: str = KROGER_API_BASE_URL
    KROGER_CHAIN: str | None = None
    PRODUCT_SEARCH_FILTER: SearchFilter = SearchFilter.TERM

    # Outbound requests and caching
    REQUEST_TIMEOUT: float = DEFAULT_TIMEOUT
    LOCATION_CACHE_TTL: int = DEFAULT_LOCATION_TTL
    TOKEN_EXPIRY_MARGIN: int = DEFAULT_TOKEN_EXPIRY_MARGIN
    SINGLE_FLIGHT: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.KROGER_CLIENT_ID and self.KROGER_CLIENT_SECRET)


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
