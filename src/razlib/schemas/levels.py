"""
Pydantic schema for the level table (levels.yaml).

Validates the YAML structure at load time before converting to the
LevelTable dataclasses.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator


class MarkersSchema(BaseModel):
    """Marker tokens a directory name must contain for the heuristic match."""

    pdf: str = "pdf"
    audio: str = "mp3"

    @field_validator("pdf", "audio")
    @classmethod
    def non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("marker token must not be empty")
        return v.strip().lower()


class LevelSchema(BaseModel):
    """One reading level and its storage directory aliases."""

    code: str = Field(..., min_length=1, max_length=4)
    pdf: list[str] = Field(default_factory=list, description="Exact PDF directory names")
    audio: list[str] = Field(default_factory=list, description="Exact audio directory names")
    heuristic: bool = True

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        """Level codes are upper-case ASCII letters/digits (AA, A, Z1)."""
        code = v.strip().upper()
        if not (code.isascii() and code.isalnum()):
            raise ValueError(f"Invalid level code: {v!r}")
        return code


class LevelsFileSchema(BaseModel):
    """Root schema for levels.yaml."""

    markers: MarkersSchema = Field(default_factory=MarkersSchema)
    levels: list[LevelSchema] = Field(..., min_length=1)

    @model_validator(mode="after")
    def unique_codes_and_aliases(self) -> LevelsFileSchema:
        """Reject duplicate level codes and aliases claimed by two levels."""
        seen_codes: set[str] = set()
        for level in self.levels:
            if level.code in seen_codes:
                raise ValueError(f"Duplicate level code: {level.code}")
            seen_codes.add(level.code)

        for kind in ("pdf", "audio"):
            owners: dict[str, str] = {}
            for level in self.levels:
                for alias in getattr(level, kind):
                    if alias in owners and owners[alias] != level.code:
                        raise ValueError(
                            f"{kind} directory {alias!r} mapped to both "
                            f"{owners[alias]} and {level.code}"
                        )
                    owners[alias] = level.code
        return self
