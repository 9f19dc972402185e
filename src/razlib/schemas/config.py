"""
Pydantic schema for config.yaml validation.

This validates the YAML structure at load time before converting to dataclasses.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class EnvironmentSchema(BaseModel):
    """Environment settings (override .env values)."""

    model_config = {"extra": "forbid"}

    env: str | None = None
    log_level: str | None = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str | None:
        """Validate log level is a recognized value."""
        if v is None:
            return v
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {set(VALID_LOG_LEVELS)}")
        return v.upper()


class PathsSchema(BaseModel):
    """Local library and output paths."""

    model_config = {"extra": "forbid"}

    pdf_root: str = Field(default="", description="Directory holding per-level PDF folders")
    audio_root: str = Field(default="", description="Directory holding per-level audio folders")
    catalog_file: str = Field(default="./data/books.json", description="Generated catalog JSON")
    levels_file: str | None = Field(default=None, description="Override for levels.yaml")
    log_file: str | None = None


class StorageSchema(BaseModel):
    """S3-compatible object store settings (credentials come from .env)."""

    model_config = {"extra": "forbid"}

    bucket: str | None = None
    endpoint_url: str | None = None
    region: str = "auto"
    pdf_prefix: str = "pdf"
    audio_prefix: str = "audio"
    timeout_seconds: int = Field(default=30, ge=1, le=300)

    @field_validator("endpoint_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Ensure URL has valid protocol."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"endpoint_url must start with http:// or https://, got: {v}")
        return v.rstrip("/") if v else v

    @field_validator("pdf_prefix", "audio_prefix")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        prefix = v.strip("/")
        if not prefix:
            raise ValueError("prefix must not be empty")
        return prefix


class CatalogSchema(BaseModel):
    """Catalog assembly options."""

    model_config = {"extra": "forbid"}

    numbering: str = "sequential"
    title_fallback: bool = False
    levels: list[str] = Field(default_factory=list, description="Restrict builds to these levels")

    @field_validator("numbering")
    @classmethod
    def validate_numbering(cls, v: str) -> str:
        allowed = {"sequential", "gaps"}
        if v.lower() not in allowed:
            raise ValueError(f"numbering must be one of {allowed}, got: {v}")
        return v.lower()


class UploadSchema(BaseModel):
    """Bulk upload settings."""

    model_config = {"extra": "forbid"}

    concurrency: int = Field(default=5, ge=1, le=64)
    max_retries: int = Field(default=3, ge=0, le=10)


class ServerSchema(BaseModel):
    """HTTP catalog service settings."""

    model_config = {"extra": "forbid"}

    host: str = "127.0.0.1"
    port: int = Field(default=8787, ge=1, le=65535)
    cors_origin: str | None = None
    cache_max_age: int = Field(default=86400, ge=0)


class ConfigSchema(BaseModel):
    """
    Complete config.yaml schema.

    Validates structure and types. Path resolution and environment variable
    merging happens in config.py after validation.
    """

    environment: EnvironmentSchema = Field(default_factory=EnvironmentSchema)
    paths: PathsSchema = Field(default_factory=PathsSchema)
    storage: StorageSchema = Field(default_factory=StorageSchema)
    catalog: CatalogSchema = Field(default_factory=CatalogSchema)
    upload: UploadSchema = Field(default_factory=UploadSchema)
    server: ServerSchema = Field(default_factory=ServerSchema)

    model_config = {"extra": "forbid"}  # Catch typos in config keys


def validate_config_yaml(data: dict[str, Any]) -> ConfigSchema:
    """
    Validate config.yaml data against schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return ConfigSchema.model_validate(data)
