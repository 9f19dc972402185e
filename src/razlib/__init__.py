"""razlib - leveled reading library catalog builder and service."""

from razlib.exceptions import (
    CatalogError,
    CatalogServiceError,
    ConfigurationError,
    RazlibError,
    StorageError,
    UploadError,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Base exception
    "RazlibError",
    # Configuration
    "ConfigurationError",
    # Library access
    "StorageError",
    "CatalogError",
    "UploadError",
    # Network
    "CatalogServiceError",
]
