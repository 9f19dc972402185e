"""
Audio index: MatchKey → audio filename for one level.

Audio files are indexed in the order the listing delivers them (directory or
bucket listing order, never re-sorted). When two files share a MatchKey the
later one wins. Existing catalogs depend on that tie-break, so it is kept and
every overwrite is recorded in the build report.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from razlib.catalog.parsing import (
    ParsedFilename,
    is_hidden,
    match_key,
    parse_filename,
    title_key,
)
from razlib.catalog.report import REASON_HIDDEN, AudioOverwrite, BuildReport, NearMiss

logger = logging.getLogger(__name__)


@dataclass
class AudioIndex:
    """Lookup tables from pairing keys to the chosen audio filename."""

    by_key: dict[str, str] = field(default_factory=dict)
    by_title: dict[str, str] = field(default_factory=dict)
    # Original titles per key, for near-miss detection
    titles: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.by_key)

    def __contains__(self, key: object) -> bool:
        return key in self.by_key

    def lookup(self, parsed: ParsedFilename, *, title_fallback: bool = False) -> str:
        """Return the matching audio filename, or "" when there is none."""
        found = self.by_key.get(match_key(parsed))
        if found is None and title_fallback:
            found = self.by_title.get(title_key(parsed))
        return found or ""

    def add(
        self,
        filename: str,
        parsed: ParsedFilename,
        report: BuildReport | None = None,
    ) -> None:
        """Insert ``filename`` under its key, overwriting any earlier entry."""
        key = match_key(parsed)
        previous = self.by_key.get(key)
        if previous is not None and report is not None:
            report.overwritten_audio.append(
                AudioOverwrite(match_key=key, replaced=previous, kept=filename)
            )
            previous_title = self.titles[key]
            if previous_title != parsed.title:
                report.near_misses.append(
                    NearMiss(match_key=key, titles=(previous_title, parsed.title))
                )
                logger.debug(
                    "Near-miss audio collision on %s: %r vs %r", key, previous_title, parsed.title
                )

        self.by_key[key] = filename
        self.titles[key] = parsed.title
        self.by_title[title_key(parsed)] = filename


def build_audio_index(
    filenames: Iterable[str],
    *,
    report: BuildReport | None = None,
) -> AudioIndex:
    """
    Build the audio index for one level.

    Args:
        filenames: Audio filenames in listing order
        report: Optional report collecting skipped files and overwrites

    Returns:
        AudioIndex with at most one filename per MatchKey (last one wins)
    """
    index = AudioIndex()

    for filename in filenames:
        if is_hidden(filename):
            if report is not None:
                report.skip(filename, "audio", REASON_HIDDEN)
            continue

        parsed = parse_filename(filename)
        if parsed is None:
            logger.debug("Skipping unparseable audio file: %s", filename)
            if report is not None:
                report.skip(filename, "audio")
            continue

        index.add(filename, parsed, report)

    return index
