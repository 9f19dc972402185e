"""Table formatting components for razlib UI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from razlib.ui.core import console

if TYPE_CHECKING:
    from razlib.catalog.assembler import BookRecord
    from razlib.catalog.builder import CatalogBuild
    from razlib.catalog.report import BuildReport
    from razlib.levels import DirectoryResolution, LevelTable
    from razlib.schemas.api import LevelPayload


def print_books_table(books: list[BookRecord], title: str = "Books") -> None:
    """Print one level's books.

    Example:
        >>> print_books_table(report.books, "Level A")
        ┏━━━━┳━━━━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━━┓
        ┃ #  ┃ Title        ┃ PDF                ┃ Audio            ┃
        ┡━━━━╇━━━━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━━┩
        │ 1  │ Farm Animals │ Farm_Animals.pdf   │ Farm Animals.mp3 │
        └────┴──────────────┴────────────────────┴──────────────────┘
    """
    if not books:
        console.print(f"[dim]No {title.lower()} found[/]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", style="number", justify="right")
    table.add_column("Title")
    table.add_column("PDF", style="path")
    table.add_column("Audio", style="audio")

    for book in books:
        table.add_row(
            book.number,
            escape(book.title),
            escape(book.pdf_path),
            escape(book.audio_path) if book.audio_path else "[dim]-[/]",
        )

    console.print(table)


def print_build_summary(build: CatalogBuild) -> None:
    """Print the per-level summary of a catalog build."""
    table = Table(title="Catalog", show_header=True, header_style="bold")
    table.add_column("Level", style="level")
    table.add_column("Books", justify="right")
    table.add_column("Audio", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("Status")

    for report in build.reports:
        if not report.ok:
            table.add_row(report.level, "-", "-", "-", "-", "[error]failed[/]")
            continue
        warnings = (
            len(report.duplicate_ids) + len(report.near_misses) + len(report.overwritten_audio)
        )
        table.add_row(
            report.level,
            str(len(report.books)),
            str(report.with_audio),
            str(len(report.skipped)),
            f"[warning]{warnings}[/]" if warnings else "0",
            "[success]ok[/]",
        )

    console.print(table)


def print_report_details(report: BuildReport) -> None:
    """Print everything a level's report flagged, one line each."""
    if report.error:
        console.print(f"  [error]✗[/] Level {report.level}: {escape(report.error)}")
        return
    for duplicate in report.duplicate_ids:
        console.print(
            f"  [warning]![/] Level {report.level}: id {duplicate.id} shared by "
            + escape(", ".join(duplicate.pdf_paths))
        )
    for miss in report.near_misses:
        console.print(
            f"  [warning]![/] Level {report.level}: titles {escape(repr(miss.titles[0]))} and "
            f"{escape(repr(miss.titles[1]))} collide on {miss.match_key}"
        )
    for overwrite in report.overwritten_audio:
        console.print(
            f"  [dim]•[/] Level {report.level}: audio {escape(overwrite.replaced)} "
            f"replaced by {escape(overwrite.kept)}"
        )
    for skipped in report.skipped:
        console.print(
            f"  [dim]•[/] Level {report.level}: skipped {skipped.kind} "
            f"{escape(skipped.filename)} ({skipped.reason})"
        )


def print_resolution_table(resolution: DirectoryResolution, table_levels: LevelTable) -> None:
    """Print directory → level resolution for one tree."""
    table = Table(
        title=f"{resolution.kind.value.upper()} directories",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Level", style="level")
    table.add_column("Directories", style="path")

    for code in table_levels.codes:
        directories = resolution.directories_for(code)
        table.add_row(code, escape(", ".join(directories)) if directories else "[dim]-[/]")

    console.print(table)

    for name in resolution.unresolved:
        console.print(f"  [warning]![/] Unrecognized directory: [path]{escape(name)}[/]")


def print_remote_levels_table(levels: list[LevelPayload]) -> None:
    """Print the level list of a deployed service."""
    table = Table(title="Levels", show_header=True, header_style="bold")
    table.add_column("Level", style="level")
    table.add_column("Books", justify="right")

    for level in levels:
        table.add_row(level.id, str(level.book_count))

    console.print(table)
