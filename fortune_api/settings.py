"""
Application settings for the fortune service.

Loads configuration from environment variables (.env file) with sensible defaults.
All settings can be overridden via environment variables.
"""

import os
from pydantic import BaseModel, Field, field_validator, ConfigDict
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


class APISettings(BaseModel):
    """API and server settings."""

    title: str = Field(default="Fortune Service", description="API title")
    description: str = Field(
        default="Fortune records kept in memory and mirrored to Redis.",
        description="API description",
    )
    version: str = Field(default="1.0.0", description="API version")
    host: str = Field(
        default=os.getenv("HOST", "0.0.0.0"),
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        default=int(os.getenv("PORT", "9000")),
        description="Port the HTTP server listens on (fixed at process start)",
    )

    @field_validator("port")
    def validate_port(cls, v):
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v


class RedisSettings(BaseModel):
    """Secondary store (Redis) configuration."""

    addr: str = Field(
        default=os.getenv("REDIS_ADDR", "redis:6379"),
        description="host:port of the Redis server (defaults to the Docker Compose service)",
    )
    db: int = Field(
        default=int(os.getenv("REDIS_DB", "0")),
        description="Redis database index",
    )
    password: str = Field(
        default=os.getenv("REDIS_PASSWORD", ""),
        description="Redis password (empty = no auth)",
    )
    hash_key: str = Field(
        default=os.getenv("REDIS_HASH_KEY", "fortunes"),
        description="Name of the Redis hash holding fortune messages keyed by id",
    )
    connect_attempts: int = Field(
        default=int(os.getenv("REDIS_CONNECT_ATTEMPTS", "5")),
        description="Number of PING attempts at startup before going memory-only",
    )
    retry_delay_seconds: float = Field(
        default=float(os.getenv("REDIS_RETRY_DELAY_SECONDS", "2")),
        description="Delay between startup connection attempts",
    )
    socket_timeout: float = Field(
        default=float(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
        description="Socket connect/read timeout for Redis calls in seconds",
    )

    @field_validator("addr")
    def validate_addr(cls, v):
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError("addr must look like 'host:port'")
        return v

    @field_validator("connect_attempts")
    def validate_attempts(cls, v):
        if v < 1:
            raise ValueError("connect_attempts must be at least 1")
        return v

    @field_validator("retry_delay_seconds", "socket_timeout")
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Value must not be negative")
        return v

    @property
    def url(self) -> str:
        """Redis connection URL built from addr, password and db."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.addr}/{self.db}"


class Settings(BaseModel):
    """Global application configuration.

    Configuration priority:
    1. Environment variables (.env file or system)
    2. Defaults specified below
    """

    storage_backend: str = Field(
        default=os.getenv("FORTUNE_STORAGE_BACKEND", "redis"),
        description="'redis' (mirror to Redis when reachable) or 'memory'",
    )
    seed_defaults: bool = Field(
        default=os.getenv("FORTUNE_SEED_DEFAULTS", "true").lower() == "true",
        description="Seed the built-in fortunes at startup",
    )
    decode_error_status: int = Field(
        default=int(os.getenv("FORTUNE_DECODE_ERROR_STATUS", "500")),
        description="HTTP status returned for an undecodable create body (500 or 400)",
    )

    api: APISettings = Field(
        default_factory=APISettings, description="API and server configuration"
    )
    redis: RedisSettings = Field(
        default_factory=RedisSettings, description="Secondary store configuration"
    )

    model_config = ConfigDict(
        extra="forbid",  # Prevent typos in environment variables
        validate_assignment=True,  # Validate on attribute assignment
    )

    @field_validator("storage_backend")
    def validate_storage_backend(cls, v):
        if v not in ["redis", "memory"]:
            raise ValueError("storage_backend must be 'redis' or 'memory'")
        return v

    @field_validator("decode_error_status")
    def validate_decode_error_status(cls, v):
        if v not in (400, 500):
            raise ValueError("decode_error_status must be 400 or 500")
        return v


# Global settings instance
settings = Settings()
