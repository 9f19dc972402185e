"""
Catalog assembly: PDF filenames + audio index → ordered book records.

Every PDF that parses becomes exactly one book, whether or not audio exists
for it. Books without a leading sequence number get an auto-assigned display
number, then the level is sorted numerically (non-numeric numbers last,
ties keep listing order).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from razlib.catalog.audio_index import AudioIndex
from razlib.catalog.parsing import ParsedFilename, is_hidden, parse_filename
from razlib.catalog.report import REASON_HIDDEN, BuildReport, DuplicateId

logger = logging.getLogger(__name__)

# Sort position for numbers that are not plain integers
NON_NUMERIC_SORT_KEY = 9999


class Numbering(str, Enum):
    """How numberless PDFs get their display number."""

    # 1, 2, 3... regardless of explicit numbers (matches existing catalogs)
    sequential = "sequential"
    # Smallest positive integers not used by any explicit number in the level
    gaps = "gaps"


@dataclass(frozen=True)
class BookRecord:
    """One book in a level catalog.

    ``id`` and ``number`` carry the same display number; ``id`` is what
    progress tracking and routing key on.
    """

    id: str
    number: str
    title: str
    level: str
    pdf_path: str
    audio_path: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialize to the published JSON shape (key order is part of it)."""
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "level": self.level,
            "pdfPath": self.pdf_path,
            "audioPath": self.audio_path,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BookRecord:
        return cls(
            id=str(data["id"]),
            number=str(data.get("number", data["id"])),
            title=str(data.get("title", "")),
            level=str(data.get("level", "")),
            pdf_path=str(data.get("pdfPath", "")),
            audio_path=str(data.get("audioPath") or ""),
        )


def sort_key(number: str) -> int:
    """Numeric sort key for a display number; non-integers sort last."""
    try:
        return int(number)
    except ValueError:
        return NON_NUMERIC_SORT_KEY


class _AutoNumberer:
    """Hands out display numbers for PDFs without a sequence number."""

    def __init__(self, numbering: Numbering, explicit: Iterable[str]) -> None:
        self.numbering = numbering
        self.counter = 1
        self.used: set[int] = set()
        if numbering is Numbering.gaps:
            self.used = {int(n) for n in explicit if n.isdigit()}

    def next(self) -> str:
        while self.counter in self.used:
            self.counter += 1
        value = self.counter
        self.counter += 1
        return str(value)


def find_duplicate_ids(books: Iterable[BookRecord]) -> list[DuplicateId]:
    """Return every id shared by more than one book, in first-seen order."""
    by_id: dict[str, list[str]] = {}
    for book in books:
        by_id.setdefault(book.id, []).append(book.pdf_path)
    return [
        DuplicateId(id=book_id, pdf_paths=tuple(paths))
        for book_id, paths in by_id.items()
        if len(paths) > 1
    ]


def assemble_catalog(
    level: str,
    pdf_filenames: Iterable[str],
    audio_index: AudioIndex,
    *,
    numbering: Numbering | str = Numbering.sequential,
    title_fallback: bool = False,
    report: BuildReport | None = None,
) -> list[BookRecord]:
    """
    Assemble the ordered book list for one level.

    Args:
        level: Canonical level code written into every record
        pdf_filenames: PDF filenames in listing order
        audio_index: Completed audio index for the same level
        numbering: Auto-numbering strategy for numberless PDFs
        title_fallback: When the exact key misses, try a title-only match
        report: Optional report receiving the books and diagnostics

    Returns:
        Books sorted by numeric display number (stable)
    """
    numbering = Numbering(numbering)

    parsed_pdfs: list[tuple[str, ParsedFilename]] = []
    for filename in pdf_filenames:
        if is_hidden(filename):
            if report is not None:
                report.skip(filename, "pdf", REASON_HIDDEN)
            continue
        parsed = parse_filename(filename)
        if parsed is None:
            logger.debug("Skipping unparseable PDF: %s", filename)
            if report is not None:
                report.skip(filename, "pdf")
            continue
        parsed_pdfs.append((filename, parsed))

    numberer = _AutoNumberer(
        numbering, (p.sequence_number for _, p in parsed_pdfs if p.sequence_number)
    )

    books: list[BookRecord] = []
    for filename, parsed in parsed_pdfs:
        audio = audio_index.lookup(parsed, title_fallback=title_fallback)
        if not audio and report is not None:
            report.unmatched_pdfs.append(filename)

        display_number = parsed.sequence_number or numberer.next()
        books.append(
            BookRecord(
                id=display_number,
                number=display_number,
                title=parsed.title,
                level=level,
                pdf_path=filename,
                audio_path=audio,
            )
        )

    books.sort(key=lambda book: sort_key(book.number))

    if report is not None:
        report.books = books
        report.duplicate_ids.extend(find_duplicate_ids(books))
        for duplicate in report.duplicate_ids:
            logger.debug(
                "Level %s: id %s shared by %s", level, duplicate.id, ", ".join(duplicate.pdf_paths)
            )

    return books
