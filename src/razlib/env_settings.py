"""Environment-based settings using pydantic-settings.

Secrets and deployment-specific values come from the environment (or a .env
file); structured settings live in config.yaml, which can override them.

Environment Variables:
    Object storage (Cloudflare R2 / any S3-compatible store):
        R2_ACCOUNT_ID - Account ID, used to build the R2 endpoint URL
        R2_ACCESS_KEY_ID - Access key ID
        R2_SECRET_ACCESS_KEY - Secret access key
        R2_BUCKET - Bucket name (default: "raz-files")
        R2_ENDPOINT_URL - Explicit endpoint (overrides the account-derived one)

    Application:
        RAZLIB_ENV - Environment name (default: "production")
        LOG_LEVEL - Logging level (default: "INFO")
        CORS_ORIGIN - Allowed origin for the catalog API (default: "*")
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class StorageEnvSettings(BaseSettings):
    """Object store credentials from R2_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="R2_",
        extra="ignore",
    )

    account_id: str = Field(default="", description="Cloudflare account ID")
    access_key_id: str = Field(default="", description="S3 access key ID")
    secret_access_key: str = Field(default="", description="S3 secret access key")
    bucket: str = Field(default="raz-files", description="Bucket name")
    endpoint_url: str = Field(default="", description="Explicit S3 endpoint URL")

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint URL format."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"R2_ENDPOINT_URL must start with http:// or https://, got: {v}")
        return v.rstrip("/") if v else v

    @property
    def endpoint(self) -> str:
        """Endpoint URL: explicit override, else derived from the account ID."""
        if self.endpoint_url:
            return self.endpoint_url
        if self.account_id:
            return f"https://{self.account_id}.r2.cloudflarestorage.com"
        return ""


class AppEnvSettings(BaseSettings):
    """Application-level settings from environment variables."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    env: str = Field(
        default="production",
        validation_alias="RAZLIB_ENV",
        description="Environment name (development/production)",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level",
    )
    cors_origin: str = Field(
        default="*",
        validation_alias="CORS_ORIGIN",
        description="Allowed CORS origin for the catalog API",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got: {v}")
        return upper


class EnvSettings(BaseSettings):
    """Combined environment settings.

    Example:
        env = get_env_settings()
        print(env.storage.bucket)
        print(env.app.log_level)
    """

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    storage: StorageEnvSettings = Field(default_factory=StorageEnvSettings)
    app: AppEnvSettings = Field(default_factory=AppEnvSettings)


@lru_cache(maxsize=1)
def get_env_settings() -> EnvSettings:
    """Get cached environment settings."""
    return EnvSettings()


def clear_env_settings_cache() -> None:
    """Clear the cached environment settings (tests, reloads)."""
    get_env_settings.cache_clear()
