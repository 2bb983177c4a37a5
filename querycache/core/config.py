"""Configuration management for querycache.

This module provides centralized configuration loading from environment
variables with validation and type safety.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Redis Store
    redis_url: str = Field(
        default="", description="Redis URL (empty = use host and port)"
    )
    redis_host: str = Field(default="127.0.0.1", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port", ge=1, le=65535)
    redis_password: str = Field(
        default="", description="Redis auth credential (empty = no auth)"
    )
    redis_db: int = Field(default=0, description="Redis database index", ge=0)
    redis_socket_timeout: float | None = Field(
        default=None, description="Redis socket timeout seconds (None = no limit)"
    )

    # Cache Behaviour
    cache_key_prefix: str = Field(
        default="knex", description="Namespace prefix for cache keys", min_length=1
    )
    cache_timeout_ms: int = Field(
        default=10000,
        description="Maximum wait for a cache read in milliseconds",
        gt=0,
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="", description="Log format (json, console, empty = by environment)"
    )
    environment: str = Field(
        default="development", description="Environment (development, production)"
    )

    # OpenTelemetry Configuration
    otel_enabled: bool = Field(
        default=False, description="Enable OpenTelemetry instrumentation"
    )
    otel_metrics_enabled: bool = Field(
        default=True, description="Enable metrics collection"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Uppercase log level so env values like 'debug' are accepted."""
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


settings = Settings()
