"""
razlib exception hierarchy.

Provides typed exceptions for infrastructure failures. Data-quality problems
(malformed filenames, missing audio, unknown directories) are never raised;
they are reported through :class:`razlib.catalog.report.BuildReport` instead.

Exception Hierarchy:
    RazlibError (base)
    ├── ConfigurationError - Config file issues, missing settings
    ├── StorageError - Listing/reading the library failed
    ├── CatalogError - Catalog file could not be written or read
    ├── UploadError - Object upload failure
    └── CatalogServiceError - Remote catalog API failures
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class RazlibError(Exception):
    """Base exception for all razlib errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """
        Initialize razlib exception.

        Args:
            message: Human-readable error message
            details: Optional structured error details for logging/debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RazlibError):
    """Configuration file or settings error."""

    def __init__(
        self,
        message: str,
        *,
        config_file: Path | str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if config_file:
            details["config_file"] = str(config_file)
        if field:
            details["field"] = field
        super().__init__(message, details=details)
        self.config_file = config_file
        self.field = field


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(RazlibError):
    """Library listing or object access failure.

    Scoped to a single level where possible so that the catalog build can
    continue with the remaining levels.
    """

    def __init__(
        self,
        message: str,
        *,
        level: str | None = None,
        kind: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if level:
            details["level"] = level
        if kind:
            details["kind"] = kind
        if key:
            details["key"] = key
        super().__init__(message, details=details)
        self.level = level
        self.kind = kind
        self.key = key


class CatalogError(RazlibError):
    """Catalog file read/write failure."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = str(path)
        super().__init__(message, details=details)
        self.path = path


class UploadError(StorageError):
    """Single object upload failure."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("kind", "upload")
        super().__init__(message, **kwargs)


# =============================================================================
# Network Errors
# =============================================================================


class CatalogServiceError(RazlibError):
    """Remote catalog service communication failure."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code
