"""
Structured build report for one level's catalog.

The matcher is best-effort: stray files are skipped, colliding audio files
overwrite each other, numberless PDFs get auto numbers. None of that fails a
build, but operators need to see it. Each catalog build returns the books
together with a BuildReport listing everything that was skipped, overwritten
or ambiguous.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from razlib.catalog.assembler import BookRecord


# Skip reasons
REASON_UNPARSEABLE = "unparseable filename"
REASON_HIDDEN = "hidden file"


@dataclass(frozen=True)
class SkippedFile:
    """A file excluded from matching."""

    filename: str
    kind: str  # "pdf" or "audio"
    reason: str


@dataclass(frozen=True)
class AudioOverwrite:
    """An audio file replaced in the index by a later file with the same key."""

    match_key: str
    replaced: str
    kept: str


@dataclass(frozen=True)
class NearMiss:
    """Two different original titles that normalized to the same key."""

    match_key: str
    titles: tuple[str, str]


@dataclass(frozen=True)
class DuplicateId:
    """Several books ended up with the same display id."""

    id: str
    pdf_paths: tuple[str, ...]


@dataclass
class BuildReport:
    """Books plus diagnostics for one level."""

    level: str
    books: list[BookRecord] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    overwritten_audio: list[AudioOverwrite] = field(default_factory=list)
    near_misses: list[NearMiss] = field(default_factory=list)
    duplicate_ids: list[DuplicateId] = field(default_factory=list)
    unmatched_pdfs: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        """False when the level could not be built at all."""
        return self.error is None

    @property
    def with_audio(self) -> int:
        return sum(1 for book in self.books if book.audio_path)

    def skip(self, filename: str, kind: str, reason: str = REASON_UNPARSEABLE) -> None:
        self.skipped.append(SkippedFile(filename=filename, kind=kind, reason=reason))

    def has_warnings(self) -> bool:
        return bool(self.duplicate_ids or self.near_misses or self.overwritten_audio)

    def summary(self) -> str:
        """One-line summary for logs."""
        if not self.ok:
            return f"Level {self.level}: FAILED ({self.error})"
        parts = [
            f"Level {self.level}: {len(self.books)} books",
            f"{self.with_audio} with audio",
        ]
        if self.skipped:
            parts.append(f"{len(self.skipped)} skipped")
        if self.overwritten_audio:
            parts.append(f"{len(self.overwritten_audio)} audio overwritten")
        if self.duplicate_ids:
            parts.append(f"{len(self.duplicate_ids)} duplicate ids")
        return ", ".join(parts)
