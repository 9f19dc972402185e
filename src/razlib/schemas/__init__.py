"""Pydantic schemas for config files and API payloads."""

from razlib.schemas.api import (
    BookPayload,
    BooksResponse,
    LevelPayload,
    LevelsResponse,
    validate_books_response,
    validate_levels_response,
)
from razlib.schemas.config import ConfigSchema, validate_config_yaml
from razlib.schemas.levels import LevelsFileSchema

__all__ = [
    "BookPayload",
    "BooksResponse",
    "ConfigSchema",
    "LevelPayload",
    "LevelsFileSchema",
    "LevelsResponse",
    "validate_books_response",
    "validate_config_yaml",
    "validate_levels_response",
]
