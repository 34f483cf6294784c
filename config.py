"""Configuration management for drive tools."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from drive_client.config import DEFAULT_BASE_URL, DriveConfig
from drive_client.errors import configuration_error
from drive_client.retry import RetryPolicy


class Settings(BaseSettings):
    """Drive tools configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DRIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    api_key: SecretStr
    base_url: str = DEFAULT_BASE_URL

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool = False

    # Request settings
    request_timeout: float = 30.0  # seconds
    upload_timeout: float = 120.0  # seconds
    max_upload_size: int = 100 * 1024 * 1024  # bytes

    # Retry settings
    max_retries: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0
    retry_jitter: float = 0.3

    @field_validator("api_key")
    @classmethod
    def _api_key_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("DRIVE_API_KEY is required")
        return value

    @field_validator("base_url")
    @classmethod
    def _base_url_is_http(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("DRIVE_BASE_URL must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay=self.retry_base_delay,
            max_delay=self.retry_max_delay,
            jitter=self.retry_jitter > 0,
            jitter_factor=self.retry_jitter,
        )

    def to_drive_config(self) -> DriveConfig:
        """Build the client configuration handed to DriveClient and FileUploader."""
        return DriveConfig(
            api_key=self.api_key.get_secret_value(),
            base_url=self.base_url,
            timeout=self.request_timeout,
            upload_timeout=self.upload_timeout,
            max_upload_size=self.max_upload_size,
            retry_policy=self.retry_policy(),
        )


def load_settings(**overrides) -> Settings:
    """
    Load and validate settings from the environment.

    Raises:
        DriveError: CONFIGURATION error listing every invalid field
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = [
            f"  - {'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        raise configuration_error(
            "Configuration validation failed:\n" + "\n".join(problems),
            fields=[".".join(str(part) for part in error["loc"]) for error in e.errors()],
        ) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    return load_settings()
