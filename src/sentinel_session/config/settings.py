"""Configuration Settings for the Sentinel session client

Manages environment variables and application configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Service info
    service_name: str = "sentinel-session"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Identity provider
    identity_provider: str = "parse"  # parse or memory
    parse_server_url: Optional[str] = None
    parse_app_id: Optional[str] = None
    parse_rest_api_key: Optional[str] = None
    provider_timeout_seconds: Optional[float] = None  # None waits indefinitely

    # Session cache
    session_cache_backend: str = "redis"  # redis or memory
    session_cache_key: str = "sentinelUser"

    # Redis configuration
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    @property
    def redis_url(self) -> str:
        """Construct Redis URL from components"""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Accounts
    avatar_base_url: str = "https://ui-avatars.com/api/"
    min_password_length: int = 6

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()
