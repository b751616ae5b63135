"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Every tunable of the cache layer (TTLs, lock lease, mutex retry
budget, rebuild pool size) lives here so deployments can adjust them without
code changes.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Defaults are safe for local development

Usage:
    from src.core.config import settings

    null_ttl = settings.cache_null_ttl_seconds

    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="Stampede Guard",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Cache backend (Redis)
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (e.g., redis://host:port/db)",
    )
    redis_max_connections: int = Field(
        default=50,
        description="Maximum connections in the Redis connection pool",
    )

    # Key namespaces
    cache_key_prefix: str = Field(
        default="cache:",
        description="Namespace prepended to every data key",
    )
    cache_lock_prefix: str = Field(
        default="lock:",
        description="Namespace for rebuild lock keys (must differ from data keys)",
    )

    # Expiry policy
    cache_default_ttl_seconds: int = Field(
        default=1800,
        description="Default hard TTL for cached values (30 minutes)",
    )
    cache_null_ttl_seconds: int = Field(
        default=120,
        description="TTL of the null marker written for ids absent from the store",
    )
    cache_logical_ttl_seconds: int = Field(
        default=20,
        description="Default logical TTL for stale-while-revalidate entries",
    )

    # Rebuild coordination
    cache_lock_ttl_seconds: float = Field(
        default=10.0,
        description="Lease of a rebuild lock; an abandoned lock frees itself after this",
    )
    cache_mutex_retry_interval_ms: int = Field(
        default=50,
        description="Sleep between lock attempts in the mutex strategy",
    )
    cache_mutex_max_attempts: int = Field(
        default=100,
        description="Lock attempts before the mutex strategy gives up",
    )
    cache_rebuild_workers: int = Field(
        default=10,
        description="Number of background rebuild workers",
    )
    cache_rebuild_queue_size: int = Field(
        default=100,
        description="Pending rebuilds accepted before new ones are rejected",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name (any case).

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        """
        Validate Redis URL scheme.

        Args:
            v: Redis URL.

        Returns:
            str: Validated URL.

        Raises:
            ValueError: If the scheme is not redis://, rediss:// or unix://.
        """
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("redis_url must start with redis://, rediss:// or unix://")
        return v

    @field_validator(
        "redis_max_connections",
        "cache_default_ttl_seconds",
        "cache_null_ttl_seconds",
        "cache_logical_ttl_seconds",
        "cache_mutex_retry_interval_ms",
        "cache_mutex_max_attempts",
        "cache_rebuild_workers",
        "cache_rebuild_queue_size",
    )
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Reject zero and negative counts and durations."""
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("cache_lock_ttl_seconds")
    @classmethod
    def validate_lock_ttl(cls, v: float) -> float:
        """Reject a non-positive lock lease."""
        if v <= 0:
            raise ValueError("cache_lock_ttl_seconds must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_key_namespaces(self) -> "Settings":
        """
        Keep lock keys out of the data key namespace.

        Raises:
            ValueError: If both prefixes are equal or the lock prefix is empty.
        """
        if not self.cache_lock_prefix:
            raise ValueError("cache_lock_prefix must not be empty")
        if self.cache_lock_prefix == self.cache_key_prefix:
            raise ValueError("cache_lock_prefix must differ from cache_key_prefix")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        """Check if running in CI environment."""
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def mutex_retry_interval_seconds(self) -> float:
        """Mutex retry interval converted to seconds."""
        return self.cache_mutex_retry_interval_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
