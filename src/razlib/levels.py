"""
Reading levels and storage directory resolution.

The level table is the single source of truth for level codes (AA, A..Z, Z1,
Z2) and the directory names each level has been stored under. Directory names
in real libraries are inconsistent ("H 级别PDF", "AA绘本pdf", "A{mp3}",
"AA｛mp3｝", "B[Mp3]"), so resolution runs in two steps:

1. Exact alias lookup from the table (data, extended in levels.yaml)
2. Prefix heuristic for levels that allow it: the name starts with the level
   code (case-insensitive), the next character is not an ASCII letter/digit,
   and the name contains the marker token for the tree ("pdf" / "mp3").
   Longer codes are tried first so "AA绘本pdf" never lands in level A.

Names that resolve to nothing are logged and reported, never fatal.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from razlib.catalog.parsing import AUDIO_EXTENSION, PDF_EXTENSION, is_hidden
from razlib.exceptions import ConfigurationError
from razlib.schemas.levels import LevelsFileSchema

logger = logging.getLogger(__name__)

DEFAULT_LEVELS_FILE = Path(__file__).parent / "data" / "levels.yaml"


class FileKind(str, Enum):
    """The two file trees every level has."""

    pdf = "pdf"
    audio = "audio"

    @property
    def extension(self) -> str:
        return PDF_EXTENSION if self is FileKind.pdf else AUDIO_EXTENSION

    @property
    def content_type(self) -> str:
        return "application/pdf" if self is FileKind.pdf else "audio/mpeg"


@dataclass(frozen=True)
class LevelSpec:
    """One level with its exact directory aliases."""

    code: str
    pdf_aliases: tuple[str, ...] = ()
    audio_aliases: tuple[str, ...] = ()
    heuristic: bool = True

    def aliases(self, kind: FileKind) -> tuple[str, ...]:
        return self.pdf_aliases if kind is FileKind.pdf else self.audio_aliases


@dataclass
class DirectoryResolution:
    """Result of resolving one tree's top-level directory names."""

    kind: FileKind
    by_level: dict[str, list[str]] = field(default_factory=dict)
    unresolved: list[str] = field(default_factory=list)

    def directories_for(self, level: str) -> list[str]:
        """Directories holding ``level`` files; empty when none resolved."""
        return self.by_level.get(level, [])


def _nfc(name: str) -> str:
    # macOS hands out NFD names; aliases are written NFC
    return unicodedata.normalize("NFC", name)


class LevelTable:
    """Ordered level codes plus directory alias lookup."""

    def __init__(self, levels: list[LevelSpec], markers: dict[str, str] | None = None) -> None:
        self.levels = list(levels)
        markers = markers or {}
        self.markers = {
            FileKind.pdf: markers.get("pdf", "pdf").lower(),
            FileKind.audio: markers.get("audio", "mp3").lower(),
        }
        self._exact: dict[FileKind, dict[str, str]] = {kind: {} for kind in FileKind}
        for spec in self.levels:
            for kind in FileKind:
                for alias in spec.aliases(kind):
                    self._exact[kind][_nfc(alias)] = spec.code
        # Longest codes first so "AA" and "Z1" win over "A" and "Z"
        self._heuristic = sorted(
            (spec.code for spec in self.levels if spec.heuristic),
            key=len,
            reverse=True,
        )

    @property
    def codes(self) -> list[str]:
        return [spec.code for spec in self.levels]

    def __contains__(self, code: object) -> bool:
        return code in self.codes

    def __iter__(self):
        return iter(self.levels)

    def __len__(self) -> int:
        return len(self.levels)

    def get(self, code: str) -> LevelSpec | None:
        for spec in self.levels:
            if spec.code == code:
                return spec
        return None

    def _heuristic_match(self, name: str, kind: FileKind) -> str | None:
        if self.markers[kind] not in name.lower():
            return None
        upper = name.upper()
        for code in self._heuristic:
            if not upper.startswith(code):
                continue
            rest = name[len(code) :]
            if rest and rest[0].isascii() and rest[0].isalnum():
                continue
            return code
        return None

    def resolve_name(self, name: str, kind: FileKind | str) -> str | None:
        """Map one top-level directory name to a level code (or None)."""
        kind = FileKind(kind)
        name = _nfc(name)
        code = self._exact[kind].get(name)
        if code is not None:
            return code
        return self._heuristic_match(name, kind)

    def resolve_directories(self, names: list[str], kind: FileKind | str) -> DirectoryResolution:
        """
        Resolve every top-level directory name of one tree.

        Several directories may feed the same level (e.g. "AA｛mp3｝" and
        "aa[Mp3]"); they are kept in listing order. Hidden names are ignored.
        """
        kind = FileKind(kind)
        resolution = DirectoryResolution(kind=kind)
        for name in names:
            if is_hidden(name):
                continue
            code = self.resolve_name(name, kind)
            if code is None:
                logger.warning("Skipping unknown %s directory: %s", kind.value, name)
                resolution.unresolved.append(name)
                continue
            resolution.by_level.setdefault(code, []).append(name)
        return resolution


def load_level_table(path: Path | None = None) -> LevelTable:
    """
    Load and validate a level table from YAML.

    Args:
        path: levels.yaml to read (default: packaged table)

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    levels_path = path or DEFAULT_LEVELS_FILE
    try:
        with open(levels_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigurationError(
            f"Level table not found: {levels_path}", config_file=levels_path
        ) from None
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in level table: {e}", config_file=levels_path
        ) from e

    try:
        schema = LevelsFileSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid level table {levels_path}:\n{e}", config_file=levels_path
        ) from e

    return LevelTable(
        [
            LevelSpec(
                code=level.code,
                pdf_aliases=tuple(level.pdf),
                audio_aliases=tuple(level.audio),
                heuristic=level.heuristic,
            )
            for level in schema.levels
        ],
        markers={"pdf": schema.markers.pdf, "audio": schema.markers.audio},
    )


@lru_cache(maxsize=1)
def default_level_table() -> LevelTable:
    """Packaged level table (cached)."""
    return load_level_table()
