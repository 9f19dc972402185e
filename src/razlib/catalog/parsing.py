"""
Book filename parsing and title normalization.

Library filenames are messy: inconsistent numbering, decorative suffixes left
behind by DRM-removal tools, mixed casing and punctuation. This module turns a
raw filename into a ``(sequence_number, title)`` pair and derives the coarse
matching key used to pair a PDF with its audio file.

Examples:
    "01- Farm Animals_Password_Removed.pdf" → ("01", "Farm Animals")
    "Farm_Animals.mp3"                      → ("", "Farm Animals")
    "readme.txt"                            → None
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# =============================================================================
# Pre-compiled Patterns
# =============================================================================

# [digits + separators] title [_Password... decoration] .pdf|.mp3
# Digits are ASCII-only; the whole pattern is case-insensitive.
FILENAME_PATTERN = re.compile(
    r"(?:(?P<number>[0-9]+)[.\-_\s]+)?"
    r"(?P<title>.+?)"
    r"(?:_Password.*)?"
    r"\.(?:pdf|mp3)",
    re.IGNORECASE,
)

SEPARATOR_RUN_PATTERN = re.compile(r"[_\-.]+")
WHITESPACE_PATTERN = re.compile(r"\s+")
NON_KEY_CHARS_PATTERN = re.compile(r"[^a-z0-9]")

PDF_EXTENSION = ".pdf"
AUDIO_EXTENSION = ".mp3"


@dataclass(frozen=True)
class ParsedFilename:
    """Structured view of a book filename."""

    sequence_number: str  # Digits as written ("02" stays "02"), "" when absent
    title: str  # Human-readable title, separators collapsed


def is_hidden(name: str) -> bool:
    """Return True for dot-prefixed entries (.DS_Store, ._resource forks)."""
    return name.startswith(".")


def clean_title(raw: str) -> str:
    """Collapse ``_ - .`` runs and whitespace into single spaces and trim."""
    title = SEPARATOR_RUN_PATTERN.sub(" ", raw)
    return WHITESPACE_PATTERN.sub(" ", title).strip()


def parse_filename(filename: str) -> ParsedFilename | None:
    """
    Parse a PDF/MP3 filename into sequence number and title.

    Args:
        filename: Bare filename (no directory part)

    Returns:
        ParsedFilename, or None if the name has no .pdf/.mp3 extension or
        no title text survives cleanup.
    """
    match = FILENAME_PATTERN.fullmatch(filename)
    if not match:
        return None

    title = clean_title(match.group("title"))
    if not title:
        return None

    return ParsedFilename(sequence_number=match.group("number") or "", title=title)


def normalize_title(title: str) -> str:
    """
    Collapse a title into a case/punctuation-insensitive matching key.

    Lossy on purpose: "Farm Animals", "farm-animals" and "FARM_ANIMALS!" all
    become "farmanimals". Non-ASCII letters are dropped entirely.
    """
    return NON_KEY_CHARS_PATTERN.sub("", title.lower())


def match_key(parsed: ParsedFilename) -> str:
    """Build the PDF/audio pairing key: ``<sequence>_<normalized title>``."""
    return f"{parsed.sequence_number}_{normalize_title(parsed.title)}"


def title_key(parsed: ParsedFilename) -> str:
    """Pairing key that ignores the sequence number (used by title fallback)."""
    return normalize_title(parsed.title)
