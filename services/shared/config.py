"""Shared configuration management for the order document service.

Based on Pydantic Settings v2 best practices:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'APP_'.
    Example: APP_STORAGE_BUCKET=order-pdfs
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Service configuration
    service_name: str = Field(
        default="order-document-service",
        description="Service identifier for metrics and logs",
    )
    service_version: str = Field(
        default="0.1.0",
        description="Service version",
    )

    # Storage configuration (S3-compatible object storage)
    storage_endpoint: str = Field(
        default="s3.amazonaws.com",
        description="S3-compatible storage endpoint (host[:port])",
    )
    storage_access_key: str = Field(
        default="",
        description="Storage access key (use env var APP_STORAGE_ACCESS_KEY)",
    )
    storage_secret_key: str = Field(
        default="",
        description="Storage secret key (use env var APP_STORAGE_SECRET_KEY)",
    )
    storage_bucket: str = Field(
        default="",
        description="Bucket for rendered documents (use env var APP_STORAGE_BUCKET)",
    )
    storage_region: str = Field(
        default="us-east-1",
        description="Storage region used for request signing",
    )
    storage_secure: bool = Field(
        default=True,
        description="Use HTTPS for storage connections",
    )

    # Rendering engine configuration
    render_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Overall timeout for browser start, paint and PDF conversion",
    )
    render_locale: str = Field(
        default="en-US",
        description="Locale of the headless browser context",
    )
    browser_args: list[str] = Field(
        default=["--no-sandbox", "--disable-setuid-sandbox"],
        description="Extra Chromium launch arguments",
    )

    # Queue configuration (arq background jobs)
    queue_enabled: bool = Field(
        default=False,
        description="Enable background render jobs via Redis",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the job queue",
    )
    queue_max_jobs: int = Field(
        default=10,
        description="Maximum concurrent jobs per worker",
    )
    queue_job_timeout: int = Field(
        default=300,
        description="Job timeout in seconds",
    )
    job_result_ttl_seconds: int = Field(
        default=86400,
        description="How long job status records are kept in Redis",
    )


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
