"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "Podman Remote"
    app_version: str = "0.1.0"

    # API settings
    api_host: str = "0.0.0.0"  # noqa: S104
    api_port: int = Field(default=3000, ge=1, le=65535)

    # Authentication settings
    api_token_file: str = Field(
        default="/run/secrets/api_token",
        description="File holding the shared bearer token (e.g. a podman secret)",
    )

    # Container engine settings
    docker_host: str = Field(
        default="unix:///var/run/docker.sock",
        description="Docker/Podman API socket URL",
    )
    docker_timeout_seconds: int = Field(
        default=5,
        ge=1,
        le=300,
        description="Connect/read timeout for container engine requests",
    )
    container_stop_timeout_seconds: int | None = Field(
        default=None,
        ge=0,
        description="Seconds to wait for a graceful stop before killing. "
        "Unset uses the engine's per-container default.",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Console log format: plain text or JSON lines",
    )
    log_file_path: str | None = Field(
        default=None,
        description="Path for rotating log file. Unset disables file logging.",
    )
    log_file_max_bytes: int = Field(
        default=10485760,  # 10MB
        description="Maximum size of each log file in bytes",
    )
    log_file_backup_count: int = Field(
        default=7,
        description="Number of backup log files to keep",
    )
    request_logging_enabled: bool = Field(
        default=True,
        description="Log method, path, status and latency of each request",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
