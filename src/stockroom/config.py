import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv
from pymongo import AsyncMongoClient

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # MongoDB
    mongo_user: str = os.getenv("MONGO_USER", "root")
    mongo_password: str = os.getenv("MONGO_PASSWORD", "root")
    mongo_server: str = os.getenv("MONGO_SERVER", "localhost")
    mongo_port: int = int(os.getenv("MONGO_PORT", "27017"))
    mongo_database: str = os.getenv("MONGO_DATABASE", "local")

    # Redis (session store)
    redis_server: str = os.getenv("REDIS_SERVER", "localhost")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Sessions, seconds; 0 keeps sessions until logout
    session_ttl: int = int(os.getenv("SESSION_TTL", str(14 * 24 * 60 * 60)))

    # Listing cache, seconds; 0 disables caching
    cache_ttl: int = int(os.getenv("CACHE_TTL", "60"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "5000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # Process lifecycle
    max_hot_restarts: int = int(os.getenv("MAX_HOT_RESTARTS", "100"))
    restart_delay: float = float(os.getenv("RESTART_DELAY", "2.5"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "text")

    @property
    def mongo_url(self) -> str:
        """Connection string for the document store."""
        return (
            f"mongodb://{self.mongo_user}:{self.mongo_password}"
            f"@{self.mongo_server}:{self.mongo_port}/{self.mongo_database}"
        )

    @property
    def cache_lifetime(self) -> timedelta | None:
        """Default lifetime of listing caches, None when caching is disabled."""
        if self.cache_ttl == 0:
            return None
        return timedelta(seconds=self.cache_ttl)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl < 0:
            raise ValueError("CACHE_TTL must be zero (disabled) or a positive number of seconds")

        if self.session_ttl < 0:
            raise ValueError("SESSION_TTL must be zero (no expiry) or a positive number of seconds")

        if self.max_hot_restarts < 1:
            raise ValueError("MAX_HOT_RESTARTS must be at least 1")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"LOG_FORMAT must be 'text' or 'json', got {self.log_format!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create an asyncio Redis client for the session store."""
    config = config or settings
    return redis.Redis(
        host=config.redis_server,
        port=config.redis_port,
        password=config.redis_password,
        decode_responses=True,
    )


def get_mongo_client(config: Settings | None = None) -> AsyncMongoClient:
    """Create an asyncio MongoDB client for the document store."""
    config = config or settings
    return AsyncMongoClient(config.mongo_url, authSource="admin", tz_aware=True)
