"""Settings and configuration management for Anchor Client."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ANCHOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Control-plane API configuration
    api_base_url: str | None = Field(
        default=None,
        description="Full base URL of the control-plane API (overrides host/port/path)",
    )

    api_host: str = Field(
        default="localhost",
        description="Control-plane API host",
    )

    api_port: int = Field(
        default=3000,
        description="Control-plane API port",
    )

    api_path: str = Field(
        default="/api/v1",
        description="Path prefix of the control-plane API",
    )

    # Transport configuration
    connect_timeout_s: float = Field(
        default=5.0,
        description="Connect timeout in seconds for every API call",
    )

    read_timeout_s: float = Field(
        default=30.0,
        description="Read timeout in seconds for regular API calls",
    )

    long_operation_timeout_s: float = Field(
        default=600.0,
        description="Read timeout in seconds for image pulls and builds",
    )

    retry_total: int = Field(
        default=2,
        description="Retries for idempotent requests on connection errors and 502/503/504",
    )

    retry_backoff_factor: float = Field(
        default=0.5,
        description="Backoff factor between retries",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log format (json or text)",
    )

    # System monitor configuration
    event_buffer_size: int = Field(
        default=100,
        description="Maximum number of daemon events kept in memory",
    )

    event_poll_interval_s: float = Field(
        default=10.0,
        description="Interval in seconds between daemon event polls",
    )

    default_log_lines: int = Field(
        default=100,
        description="Number of container log lines requested by default",
    )

    @property
    def base_url(self) -> str:
        """Resolve the control-plane API base URL without a trailing slash."""
        if self.api_base_url:
            return self.api_base_url.rstrip("/")
        path = "/" + self.api_path.strip("/") if self.api_path.strip("/") else ""
        return f"http://{self.api_host}:{self.api_port}{path}"

    @property
    def timeout(self) -> tuple[float, float]:
        """Connect/read timeout pair passed to every request."""
        return (self.connect_timeout_s, self.read_timeout_s)

    @property
    def long_operation_timeout(self) -> tuple[float, float]:
        """Connect/read timeout pair for image pulls and builds."""
        return (self.connect_timeout_s, self.long_operation_timeout_s)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
