"""
Configuration loading from .env and config.yaml.

Setting Sources and Precedence
==============================
1. **config.yaml** (structured config, validated by razlib.schemas.config):
   - paths: pdf_root, audio_root, catalog_file, levels_file, log_file
   - storage: bucket, endpoint_url, region, pdf_prefix, audio_prefix
   - catalog: numbering, title_fallback, levels
   - upload: concurrency, max_retries
   - server: host, port, cors_origin, cache_max_age
   - environment: env, log_level (override .env)

2. **.env file / environment** (secrets, see razlib.env_settings):
   - R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY, R2_BUCKET
   - RAZLIB_ENV, LOG_LEVEL, CORS_ORIGIN

3. **levels.yaml** (level codes and directory aliases; packaged default,
   overridable with paths.levels_file)

Precedence: config.yaml > environment > defaults.

Path Resolution
===============
Absolute paths are used as-is; relative paths in config.yaml are resolved
against the directory containing config.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from razlib.catalog.assembler import Numbering
from razlib.env_settings import clear_env_settings_cache, get_env_settings
from razlib.exceptions import ConfigurationError
from razlib.levels import LevelTable, default_level_table, load_level_table
from razlib.paths import default_log_file
from razlib.schemas.config import validate_config_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("config/config.yaml")


@dataclass
class PathsConfig:
    """Local library and output paths (from config.yaml paths section)."""

    pdf_root: Path | None
    audio_root: Path | None
    catalog_file: Path
    log_file: Path
    levels_file: Path | None = None


@dataclass
class StorageConfig:
    """
    Object store settings.

    Credentials come from .env; bucket/endpoint may be overridden in config.yaml.
    """

    bucket: str = "raz-files"
    endpoint_url: str = ""
    region: str = "auto"
    access_key_id: str = ""
    secret_access_key: str = ""
    pdf_prefix: str = "pdf"
    audio_prefix: str = "audio"
    timeout_seconds: int = 30

    @property
    def configured(self) -> bool:
        return bool(self.endpoint_url and self.access_key_id and self.secret_access_key)


@dataclass
class CatalogConfig:
    """Catalog assembly options (from config.yaml catalog section)."""

    numbering: Numbering = Numbering.sequential
    title_fallback: bool = False
    # Empty means every level in the level table
    levels: list[str] = field(default_factory=list)


@dataclass
class UploadConfig:
    """Bulk upload settings."""

    concurrency: int = 5
    max_retries: int = 3


@dataclass
class ServerConfig:
    """HTTP catalog service settings."""

    host: str = "127.0.0.1"
    port: int = 8787
    cors_origin: str = "*"
    cache_max_age: int = 86400


@dataclass
class Settings:
    """
    Complete application settings.

    See module docstring for setting sources.
    """

    env: str
    log_level: str
    paths: PathsConfig
    storage: StorageConfig
    catalog: CatalogConfig
    upload: UploadConfig
    server: ServerConfig
    levels: LevelTable = field(default_factory=default_level_table)

    def selected_levels(self) -> list[str]:
        """Levels to build: catalog.levels if set, else the whole table."""
        return list(self.catalog.levels) or self.levels.codes


def validate_settings(settings: Settings) -> list[str]:
    """
    Check settings for problems that are not fatal at load time.

    Returns:
        List of warning messages.

    Raises:
        ConfigurationError: If catalog.levels names a level the table lacks
    """
    warnings: list[str] = []

    unknown = [code for code in settings.catalog.levels if code not in settings.levels]
    if unknown:
        raise ConfigurationError(
            f"Unknown level code(s) in catalog.levels: {', '.join(unknown)}",
            field="catalog.levels",
        )

    for name in ("pdf_root", "audio_root"):
        path = getattr(settings.paths, name)
        if path is None:
            warnings.append(f"paths.{name} is not set; local catalog builds are unavailable")
        elif not path.exists():
            warnings.append(f"paths.{name} does not exist: {path}")

    return warnings


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            "config.yaml must contain a mapping at the top level", config_file=config_path
        )
    return data


def load_settings(
    env_file: Path | None = None,
    config_file: Path | None = None,
    *,
    validate: bool = True,
) -> Settings:
    """
    Load settings from .env and config.yaml files.

    Args:
        env_file: Path to .env file (default: .env next to config.yaml, or in current dir)
        config_file: Path to config.yaml. When omitted and config/config.yaml
            does not exist, defaults are used.
        validate: If True, run validate_settings() and log warnings

    Returns:
        Populated Settings object

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ConfigurationError: If the config file is invalid
    """
    config_path = config_file or DEFAULT_CONFIG_FILE

    if env_file:
        env_path = env_file
    else:
        env_next_to_config = config_path.resolve().parent / ".env"
        env_path = env_next_to_config if env_next_to_config.exists() else Path(".env")

    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()
    clear_env_settings_cache()
    env = get_env_settings()

    if config_file is None and not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        yaml_config: dict[str, Any] = {}
    else:
        yaml_config = load_yaml_config(config_path)

    try:
        schema = validate_config_yaml(yaml_config)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid config.yaml:\n{e}", config_file=config_path.resolve()
        ) from e

    base_dir = config_path.resolve().parent

    def resolve_path(path_str: str) -> Path:
        """Resolve a path, making relative paths relative to the config directory."""
        p = Path(path_str).expanduser()
        if p.is_absolute():
            return p
        return (base_dir / p).resolve()

    paths = PathsConfig(
        pdf_root=resolve_path(schema.paths.pdf_root) if schema.paths.pdf_root else None,
        audio_root=resolve_path(schema.paths.audio_root) if schema.paths.audio_root else None,
        catalog_file=resolve_path(schema.paths.catalog_file),
        log_file=(
            resolve_path(schema.paths.log_file) if schema.paths.log_file else default_log_file()
        ),
        levels_file=resolve_path(schema.paths.levels_file) if schema.paths.levels_file else None,
    )

    storage = StorageConfig(
        bucket=schema.storage.bucket or env.storage.bucket,
        endpoint_url=schema.storage.endpoint_url or env.storage.endpoint,
        region=schema.storage.region,
        access_key_id=env.storage.access_key_id,
        secret_access_key=env.storage.secret_access_key,
        pdf_prefix=schema.storage.pdf_prefix,
        audio_prefix=schema.storage.audio_prefix,
        timeout_seconds=schema.storage.timeout_seconds,
    )

    levels = load_level_table(paths.levels_file) if paths.levels_file else default_level_table()

    settings = Settings(
        env=schema.environment.env or env.app.env,
        log_level=schema.environment.log_level or env.app.log_level,
        paths=paths,
        storage=storage,
        catalog=CatalogConfig(
            numbering=Numbering(schema.catalog.numbering),
            title_fallback=schema.catalog.title_fallback,
            levels=[code.upper() for code in schema.catalog.levels],
        ),
        upload=UploadConfig(
            concurrency=schema.upload.concurrency,
            max_retries=schema.upload.max_retries,
        ),
        server=ServerConfig(
            host=schema.server.host,
            port=schema.server.port,
            cors_origin=schema.server.cors_origin or env.app.cors_origin,
            cache_max_age=schema.server.cache_max_age,
        ),
        levels=levels,
    )

    if validate:
        for warning in validate_settings(settings):
            logger.warning(warning)

    return settings


# Lazy-loaded global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (lazy-loaded)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reload_settings(
    env_file: Path | None = None,
    config_file: Path | None = None,
    *,
    validate: bool = True,
) -> Settings:
    """Reload settings from files and replace the global instance."""
    global _settings
    _settings = load_settings(env_file, config_file, validate=validate)
    return _settings


def clear_settings() -> None:
    """Clear the cached settings instance."""
    global _settings
    _settings = None
