"""Service configuration loaded from environment variables."""

import logging
from enum import Enum

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SQUARE_BASE_URLS = {
    "production": "https://connect.squareup.com",
    "sandbox": "https://connect.squareupsandbox.com",
}


class SquareEnvironment(str, Enum):
    """Upstream API environments."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"


class CacheProviderType(str, Enum):
    """Supported cache backends."""

    MEMORY = "memory"
    REDIS = "redis"
    DYNAMODB = "dynamodb"


class Settings(BaseSettings):
    """Validated application settings.

    Each field is read from the upper-cased environment variable of the same name
    (``square_access_token`` from ``SQUARE_ACCESS_TOKEN``). Use ``Settings.from_env()``
    at startup; it fails fast with a ``ValueError`` describing every invalid variable.
    """

    model_config = SettingsConfigDict(case_sensitive=False, env_ignore_empty=True, extra="ignore")

    square_access_token: str = Field(..., min_length=1)
    square_environment: SquareEnvironment = SquareEnvironment.SANDBOX
    square_api_version: str = "2024-12-18"
    square_timeout_seconds: float = Field(default=15.0, gt=0)

    cache_provider: CacheProviderType = CacheProviderType.MEMORY
    cache_ttl_seconds: int = Field(default=300, gt=0)
    redis_url: str | None = None
    dynamodb_cache_table: str = "menu-catalog-cache"
    dynamodb_endpoint: str | None = None
    aws_region: str = "us-east-1"

    cors_origin: str = "http://localhost:5173"
    log_level: str = "INFO"
    environment: str = "development"

    @model_validator(mode="after")
    def validate_cache_backend(self) -> "Settings":
        """Require a Redis URL when the Redis backend is selected."""
        if self.cache_provider == CacheProviderType.REDIS and not self.redis_url:
            raise ValueError("REDIS_URL is required when CACHE_PROVIDER=redis")
        return self

    @property
    def square_base_url(self) -> str:
        """Base URL of the upstream API for the configured environment."""
        return SQUARE_BASE_URLS[self.square_environment.value]

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment.

        Returns:
            Validated Settings instance

        Raises:
            ValueError: If any variable is missing or invalid
        """
        try:
            return cls()
        except ValidationError as e:
            problems = "\n".join(
                f"  {'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
                for err in e.errors()
            )
            logger.error(f"Invalid environment configuration:\n{problems}")
            raise ValueError(f"Invalid environment configuration:\n{problems}") from e
