"""Tests for exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

from razlib.exceptions import (
    CatalogError,
    CatalogServiceError,
    ConfigurationError,
    RazlibError,
    StorageError,
    UploadError,
)


class TestRazlibError:
    """Tests for base exception."""

    def test_simple_message(self) -> None:
        exc = RazlibError("test error")
        assert str(exc) == "test error"
        assert exc.message == "test error"
        assert exc.details == {}

    def test_with_details(self) -> None:
        exc = RazlibError("test", details={"key": "value"})
        assert exc.details == {"key": "value"}

    @pytest.mark.parametrize(
        "exc_type",
        [ConfigurationError, StorageError, CatalogError, UploadError, CatalogServiceError],
    )
    def test_subclasses_caught_as_base(self, exc_type: type[RazlibError]) -> None:
        with pytest.raises(RazlibError):
            raise exc_type("boom")


class TestConfigurationError:
    """Tests for configuration errors."""

    def test_basic(self) -> None:
        exc = ConfigurationError("Invalid config")
        assert exc.config_file is None
        assert exc.field is None

    def test_with_file_and_field(self) -> None:
        exc = ConfigurationError(
            "Unknown level", config_file=Path("/etc/razlib/config.yaml"), field="catalog.levels"
        )
        assert exc.details == {
            "config_file": "/etc/razlib/config.yaml",
            "field": "catalog.levels",
        }


class TestStorageError:
    """Tests for storage errors."""

    def test_scoped_to_level(self) -> None:
        exc = StorageError("Cannot list", level="A", kind="pdf", key="pdf/A/")
        assert exc.level == "A"
        assert exc.details == {"level": "A", "kind": "pdf", "key": "pdf/A/"}

    def test_upload_error_is_storage_error(self) -> None:
        exc = UploadError("Failed to upload", level="B", key="audio/B/1.mp3")
        assert isinstance(exc, StorageError)
        assert exc.kind == "upload"
        assert exc.key == "audio/B/1.mp3"


class TestCatalogErrors:
    """Tests for catalog file and service errors."""

    def test_catalog_error_path(self) -> None:
        exc = CatalogError("Cannot write catalog", path=Path("/tmp/books.json"))
        assert exc.path == Path("/tmp/books.json")
        assert exc.details["path"] == "/tmp/books.json"

    def test_service_error(self) -> None:
        exc = CatalogServiceError("API error", url="http://x/api/levels", status_code=502)
        assert exc.status_code == 502
        assert exc.details == {"url": "http://x/api/levels", "status_code": 502}
