"""
Configuration module for the room catalog.

This module provides centralized configuration management using Pydantic settings.
All configuration values can be overridden via environment variables or .env file.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for the room catalog frontend.

    All settings can be configured via environment variables.
    Settings are validated on instantiation to ensure correct configuration.

    Attributes:
        LAYOUTS_API_URL: Collection URL of the hosted layouts CRUD API
        APP_NAME: Display name for the application
        DEBUG: Enable debug mode (shows API docs)
        HOST: Server bind address
        PORT: Server port number
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_JSON: Emit JSON structured logs instead of human-readable lines
        REQUEST_TIMEOUT: Timeout for calls to the layouts API in seconds
        SLOW_REQUEST_THRESHOLD_MS: Requests slower than this are logged as warnings
        ENABLE_TRACING: Export OpenTelemetry traces
        OTLP_ENDPOINT: OTLP collector endpoint used when tracing is enabled
    """

    # External CRUD resource
    LAYOUTS_API_URL: str = Field(
        default="https://68be829f9c70953d96ec8200.mockapi.io/api/romm-furniture",
        description="Collection URL of the hosted layouts API",
    )

    # Application configuration
    APP_NAME: str = Field(
        default="Room Furniture",
        description="Display name for the application",
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Server configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Server port number",
    )

    # Logging configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Use JSON structured log output",
    )

    # HTTP client configuration
    REQUEST_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        le=30.0,
        description="Timeout for layouts API requests in seconds",
    )

    SLOW_REQUEST_THRESHOLD_MS: float = Field(
        default=1000.0,
        gt=0,
        description="Threshold in milliseconds for slow request warnings",
    )

    # Tracing configuration
    ENABLE_TRACING: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing",
    )
    OTLP_ENDPOINT: str = Field(
        default="localhost:4317",
        description="OTLP gRPC endpoint for trace export",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LAYOUTS_API_URL")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """
        Validate that the API URL is properly formatted.

        Args:
            value: The URL to validate

        Returns:
            The validated URL without trailing slash

        Raises:
            ValueError: If URL is invalid
        """
        if not value:
            raise ValueError("Layouts API URL cannot be empty")

        value = value.rstrip("/")

        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(
                f"Layouts API URL must start with http:// or https://, got: {value}"
            )

        return value


# Global settings instance
settings = Settings()
