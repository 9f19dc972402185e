"""
Catalog builder: library source → per-level book lists → books.json.

Each level is built independently. Audio is listed first (the index must be
complete before any PDF is paired), then PDFs are listed and assembled. A
storage failure for one level marks that level failed in its report and the
remaining levels still build.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from razlib.catalog.assembler import BookRecord, Numbering, assemble_catalog
from razlib.catalog.audio_index import build_audio_index
from razlib.catalog.report import BuildReport
from razlib.exceptions import CatalogError, StorageError
from razlib.levels import FileKind, default_level_table

if TYPE_CHECKING:
    from razlib.sources import LibrarySource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOptions:
    """Knobs for catalog assembly."""

    numbering: Numbering = Numbering.sequential
    title_fallback: bool = False


@dataclass
class CatalogBuild:
    """Reports for every built level, in canonical level order."""

    reports: list[BuildReport] = field(default_factory=list)

    @property
    def failed(self) -> list[BuildReport]:
        return [report for report in self.reports if not report.ok]

    @property
    def book_count(self) -> int:
        return sum(len(report.books) for report in self.reports)

    def get(self, level: str) -> BuildReport | None:
        for report in self.reports:
            if report.level == level:
                return report
        return None

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Level code → serialized books. Failed levels publish an empty list."""
        return {
            report.level: [book.to_dict() for book in report.books] for report in self.reports
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def build_level(
    source: LibrarySource,
    level: str,
    *,
    options: BuildOptions | None = None,
) -> BuildReport:
    """
    Build the catalog for one level.

    Raises:
        StorageError: If either listing fails
    """
    options = options or BuildOptions()
    report = BuildReport(level=level)

    audio_files = source.list_files(level, FileKind.audio)
    index = build_audio_index(audio_files, report=report)

    pdf_files = source.list_files(level, FileKind.pdf)
    assemble_catalog(
        level,
        pdf_files,
        index,
        numbering=options.numbering,
        title_fallback=options.title_fallback,
        report=report,
    )

    logger.debug(report.summary())
    return report


def build_catalog(
    source: LibrarySource,
    levels: Iterable[str] | None = None,
    *,
    options: BuildOptions | None = None,
) -> CatalogBuild:
    """
    Build every requested level (default: the whole level table).

    A StorageError while building one level is recorded on that level's
    report; the others are unaffected.
    """
    codes = list(levels) if levels is not None else default_level_table().codes
    build = CatalogBuild()

    for code in codes:
        try:
            report = build_level(source, code, options=options)
        except StorageError as e:
            logger.warning("Level %s failed: %s", code, e)
            report = BuildReport(level=code, error=str(e))
        build.reports.append(report)

    logger.info(
        "Built %d levels, %d books (%d failed)",
        len(build.reports),
        build.book_count,
        len(build.failed),
    )
    return build


def write_catalog(build: CatalogBuild, path: Path) -> Path:
    """
    Write books.json (UTF-8, trailing newline).

    Raises:
        CatalogError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(build.to_json() + "\n", encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot write catalog: {e}", path=path) from e
    logger.info("Wrote catalog to %s", path)
    return path


def load_catalog(path: Path) -> dict[str, list[BookRecord]]:
    """
    Read a books.json back into BookRecords.

    Raises:
        CatalogError: If the file is missing or malformed
    """
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise CatalogError(f"Catalog not found: {path}", path=path) from None
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog: {e}", path=path) from e

    if not isinstance(data, dict):
        raise CatalogError("Catalog must be a JSON object keyed by level", path=path)

    try:
        return {
            str(level): [BookRecord.from_dict(item) for item in books]
            for level, books in data.items()
        }
    except (KeyError, TypeError) as e:
        raise CatalogError(f"Malformed book entry in catalog: {e}", path=path) from e
