"""Pydantic schemas for the catalog API payloads.

Used by the service to shape responses and by the client to validate them.
Field names are the published camelCase JSON names; Python code reads them
through snake_case aliases. Unknown fields are ignored so older clients keep
working against newer services.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LevelPayload(BaseModel):
    """One entry of GET /api/levels."""

    id: str
    name: str
    book_count: int = Field(default=0, alias="bookCount")

    model_config = {"extra": "ignore", "populate_by_name": True}


class LevelsResponse(BaseModel):
    """Response from GET /api/levels."""

    levels: list[LevelPayload] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class BookPayload(BaseModel):
    """One book record as published."""

    id: str
    number: str
    title: str
    level: str
    pdf_path: str = Field(alias="pdfPath")
    audio_path: str = Field(default="", alias="audioPath")

    model_config = {"extra": "ignore", "populate_by_name": True}


class BooksResponse(BaseModel):
    """Response from GET /api/levels/{level}/books."""

    books: list[BookPayload] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


def validate_levels_response(data: dict[str, Any]) -> LevelsResponse:
    """Validate and parse a levels API response.

    Raises:
        pydantic.ValidationError: If response doesn't match schema
    """
    return LevelsResponse.model_validate(data)


def validate_books_response(data: dict[str, Any]) -> BooksResponse:
    """Validate and parse a books API response.

    Raises:
        pydantic.ValidationError: If response doesn't match schema
    """
    return BooksResponse.model_validate(data)
