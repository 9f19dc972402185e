"""Tests for Pydantic schema validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from razlib.schemas import (
    BookPayload,
    validate_books_response,
    validate_config_yaml,
    validate_levels_response,
)


class TestConfigSchema:
    """Tests for config.yaml validation."""

    def test_empty_config_uses_defaults(self) -> None:
        schema = validate_config_yaml({})
        assert schema.catalog.numbering == "sequential"
        assert schema.storage.pdf_prefix == "pdf"
        assert schema.server.port == 8787
        assert schema.upload.concurrency == 5

    def test_full_config(self) -> None:
        schema = validate_config_yaml(
            {
                "environment": {"env": "development", "log_level": "debug"},
                "paths": {"pdf_root": "/srv/raz/pdf", "audio_root": "/srv/raz/audio"},
                "storage": {
                    "bucket": "raz-files",
                    "endpoint_url": "https://acct.r2.cloudflarestorage.com/",
                    "pdf_prefix": "/pdf/",
                },
                "catalog": {"numbering": "GAPS", "title_fallback": True, "levels": ["a", "b"]},
                "upload": {"concurrency": 8, "max_retries": 0},
                "server": {"cors_origin": "https://raz.example", "cache_max_age": 0},
            }
        )
        assert schema.environment.log_level == "DEBUG"
        assert schema.storage.endpoint_url == "https://acct.r2.cloudflarestorage.com"
        assert schema.storage.pdf_prefix == "pdf"
        assert schema.catalog.numbering == "gaps"
        assert schema.catalog.title_fallback is True

    def test_typo_rejected(self) -> None:
        with pytest.raises(ValidationError, match="extra"):
            validate_config_yaml({"catalgo": {}})

    @pytest.mark.parametrize(
        "data",
        [
            {"environment": {"log_level": "LOUD"}},
            {"storage": {"endpoint_url": "r2.example"}},
            {"storage": {"audio_prefix": "/"}},
            {"catalog": {"numbering": "random"}},
            {"upload": {"concurrency": 0}},
            {"upload": {"max_retries": 11}},
            {"server": {"port": 70000}},
        ],
    )
    def test_invalid_values(self, data: dict) -> None:
        with pytest.raises(ValidationError):
            validate_config_yaml(data)


class TestApiSchemas:
    """Tests for the catalog API payload schemas."""

    def test_levels_response(self) -> None:
        response = validate_levels_response(
            {"levels": [{"id": "AA", "name": "AA", "bookCount": 4, "color": "red"}]}
        )
        assert response.levels[0].book_count == 4

    def test_levels_by_alias_dump(self) -> None:
        response = validate_levels_response({"levels": [{"id": "A", "name": "A"}]})
        assert response.model_dump(by_alias=True) == {
            "levels": [{"id": "A", "name": "A", "bookCount": 0}]
        }

    def test_books_response(self) -> None:
        response = validate_books_response(
            {
                "books": [
                    {
                        "id": "1",
                        "number": "1",
                        "title": "Sun",
                        "level": "B",
                        "pdfPath": "1.Sun.pdf",
                    }
                ]
            }
        )
        assert response.books[0].pdf_path == "1.Sun.pdf"
        assert response.books[0].audio_path == ""

    def test_book_requires_pdf_path(self) -> None:
        with pytest.raises(ValidationError):
            BookPayload.model_validate({"id": "1", "number": "1", "title": "T", "level": "B"})

    def test_book_populate_by_name(self) -> None:
        book = BookPayload(id="1", number="1", title="T", level="B", pdf_path="1.T.pdf")
        assert book.model_dump(by_alias=True)["pdfPath"] == "1.T.pdf"
