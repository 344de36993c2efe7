"""Configuration management for the Totali application.

This module handles all configuration aspects of the application including:
- Environment variable loading and validation using Pydantic
- Database connection settings
- Identity provider (Supabase) token verification settings
- Redis settings for the pricing-lookup cache
- Feature flag management

Settings are read from the environment and an optional ``.env`` file. Each
group is its own ``BaseSettings`` so it can be instantiated (and overridden)
independently in tests.
"""

from functools import lru_cache
from typing import List, Optional
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    case_sensitive=True,
    extra="ignore",
)


class EnvironmentType(str, Enum):
    """Environment types for configuration management"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class FeatureFlags(BaseSettings):
    """Feature flag configurations"""

    ENABLE_PRICING_CACHE: bool = True
    SEED_SYSTEM_CATEGORIES: bool = True
    ENABLE_DEBUG_LOGGING: bool = False

    model_config = _ENV_CONFIG


class DatabaseSettings(BaseSettings):
    """Database-specific configurations"""

    DATABASE_URL: Optional[str] = None
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "totali"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    SQL_ECHO: bool = False
    SLOW_QUERY_THRESHOLD: float = 1.0

    model_config = _ENV_CONFIG

    @property
    def url(self) -> str:
        """Connection URL, preferring an explicit DATABASE_URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class SupabaseSettings(BaseSettings):
    """Identity provider settings used for bearer-token verification"""

    SUPABASE_URL: Optional[str] = None
    SUPABASE_JWT_SECRET: str = ""
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    JWT_ALGORITHM: str = "HS256"

    model_config = _ENV_CONFIG


class RedisSettings(BaseSettings):
    """Redis configuration for the pricing-lookup cache"""

    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0
    REDIS_KEY_PREFIX: str = "totali:"
    REDIS_TTL_SECONDS: int = 3600

    model_config = _ENV_CONFIG

    @property
    def enabled(self) -> bool:
        return bool(self.REDIS_HOST)


class Settings(BaseSettings):
    """Main application settings with environment-specific configurations"""

    # Basic application settings
    APP_NAME: str = "Totali"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # HTTP settings
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8501"]
    API_V1_PREFIX: str = "/api/v1"

    FEATURES: FeatureFlags = Field(default_factory=FeatureFlags)
    DB: DatabaseSettings = Field(default_factory=DatabaseSettings)
    SUPABASE: SupabaseSettings = Field(default_factory=SupabaseSettings)
    REDIS: RedisSettings = Field(default_factory=RedisSettings)

    model_config = _ENV_CONFIG

    @property
    def PROD(self) -> bool:
        """Check if environment is production"""
        return self.ENVIRONMENT == EnvironmentType.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()
