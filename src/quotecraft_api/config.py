"""Application configuration and plan settings."""

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    REDIS = "redis"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_env: Environment = Environment.DEVELOPMENT
    api_prefix: str = "/v1"
    log_level: str = "INFO"

    # Storage
    storage_backend: StorageBackend = StorageBackend.MEMORY
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 100

    # Plans
    monthly_quote_limit: int = 50
    trial_days: int = 14
    upgrade_url: str = "https://quotecraft.app/pricing"

    # Quotes
    enforce_status_transitions: bool = True
    default_template_style: str = "professional"

    model_config = {"env_prefix": "", "case_sensitive": False}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class SubscriptionTier(str, Enum):
    """User subscription tiers."""

    FREE = "free"
    PRO = "pro"
