"""Catalog commands.

Commands: build, show, levels
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from razlib.catalog.assembler import Numbering
from razlib.catalog.builder import (
    BuildOptions,
    build_catalog,
    build_level,
    load_catalog,
    write_catalog,
)
from razlib.cli._app import CATALOG_COMMANDS, LevelsOpt, NumberingOpt, TitleFallbackOpt
from razlib.cli._context import RuntimeContext, get_runtime_context
from razlib.exceptions import CatalogError, StorageError
from razlib.levels import FileKind
from razlib.ui import (
    console,
    print_books_table,
    print_build_summary,
    print_error,
    print_report_details,
    print_resolution_table,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)


def _build_options(
    runtime: RuntimeContext, numbering: Numbering | None, title_fallback: bool | None
) -> BuildOptions:
    catalog = runtime.settings.catalog
    return BuildOptions(
        numbering=numbering or catalog.numbering,
        title_fallback=catalog.title_fallback if title_fallback is None else title_fallback,
    )


def _check_levels(runtime: RuntimeContext, levels: list[str]) -> None:
    unknown = [code for code in levels if code not in runtime.settings.levels]
    if unknown:
        raise typer.BadParameter(
            f"Unknown level code(s): {', '.join(unknown)}", param_hint="--level"
        )


def register_catalog_commands(app: typer.Typer) -> None:
    """Register catalog commands on the app."""

    @app.command(rich_help_panel=CATALOG_COMMANDS)
    def build(
        ctx: typer.Context,
        output: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Catalog file (default: paths.catalog_file)."),
        ] = None,
        level: LevelsOpt = None,
        numbering: NumberingOpt = None,
        title_fallback: TitleFallbackOpt = None,
        details: Annotated[
            bool,
            typer.Option("--details", "-d", help="List every skipped file and collision."),
        ] = False,
        allow_partial: Annotated[
            bool,
            typer.Option(
                "--allow-partial",
                help="Write the catalog even if some levels failed (they publish empty).",
            ),
        ] = False,
    ) -> None:
        """Build books.json from the local library.

        Scans the PDF and audio roots, pairs each PDF with its narration and
        writes one ordered book list per level.

        [bold]Examples:[/]
          razlib build                     [dim]# All levels[/]
          razlib build -l A -l B --details [dim]# Two levels, full report[/]
          razlib build --numbering gaps    [dim]# Skip numbers already taken[/]
        """
        runtime = get_runtime_context(ctx)
        levels = level or runtime.settings.selected_levels()
        _check_levels(runtime, levels)
        library = runtime.local_library()

        build_result = build_catalog(
            library, levels, options=_build_options(runtime, numbering, title_fallback)
        )
        print_build_summary(build_result)

        for report in build_result.reports:
            if report.duplicate_ids or not report.ok or details:
                print_report_details(report)

        if build_result.failed and not allow_partial:
            print_error(
                f"{len(build_result.failed)} level(s) failed; catalog not written "
                "(use --allow-partial to write anyway)"
            )
            raise typer.Exit(1)

        target = output or runtime.settings.paths.catalog_file
        try:
            write_catalog(build_result, target)
        except CatalogError as e:
            print_error(escape(e.message))
            raise typer.Exit(1) from e

        print_success(f"Wrote {build_result.book_count} books to [path]{target}[/]")
        if build_result.failed:
            raise typer.Exit(1)

    @app.command(rich_help_panel=CATALOG_COMMANDS)
    def show(
        ctx: typer.Context,
        level: Annotated[str, typer.Argument(help="Level code (e.g. A, Z1).")],
        numbering: NumberingOpt = None,
        title_fallback: TitleFallbackOpt = None,
        details: Annotated[
            bool,
            typer.Option("--details", "-d", help="List every skipped file and collision."),
        ] = False,
        from_catalog: Annotated[
            bool,
            typer.Option(
                "--from-catalog",
                help="Read the level from the written catalog instead of scanning.",
            ),
        ] = False,
    ) -> None:
        """Build one level and print its books.

        With --from-catalog the books come from paths.catalog_file as last
        written by build.

        [bold]Examples:[/]
          razlib show A
          razlib show z1 --title-fallback
          razlib show B --from-catalog
        """
        runtime = get_runtime_context(ctx)
        code = level.strip().upper()
        _check_levels(runtime, [code])

        if from_catalog:
            catalog_file = runtime.settings.paths.catalog_file
            try:
                books = load_catalog(catalog_file).get(code)
            except CatalogError as e:
                print_error(escape(e.message))
                raise typer.Exit(1) from e
            if books is None:
                print_error(f"Level {code} is not in [path]{escape(str(catalog_file))}[/]")
                raise typer.Exit(1)
            print_books_table(books, title=f"Level {code}")
            console.print(f"[dim]{len(books)} books[/]")
            return

        library = runtime.local_library()

        try:
            report = build_level(
                library, code, options=_build_options(runtime, numbering, title_fallback)
            )
        except StorageError as e:
            print_error(escape(e.message))
            raise typer.Exit(1) from e

        print_books_table(report.books, title=f"Level {code}")
        console.print(f"[dim]{report.summary()}[/]")
        if details or report.has_warnings():
            print_report_details(report)

    @app.command("levels", rich_help_panel=CATALOG_COMMANDS)
    def levels_cmd(
        ctx: typer.Context,
        kind: Annotated[
            FileKind | None,
            typer.Option(
                "--kind", "-k", help="Only this tree (pdf or audio).", case_sensitive=False
            ),
        ] = None,
    ) -> None:
        """Show how local directories map to level codes.

        Directories that match no level are listed at the end of each table
        and ignored by build and upload.
        """
        runtime = get_runtime_context(ctx)
        library = runtime.local_library()

        kinds = [kind] if kind is not None else list(FileKind)
        unresolved = 0
        for tree in kinds:
            try:
                resolution = library.resolve(tree)
            except StorageError as e:
                print_error(escape(e.message))
                raise typer.Exit(1) from e
            print_resolution_table(resolution, runtime.settings.levels)
            unresolved += len(resolution.unresolved)

        if unresolved:
            print_warning(f"{unresolved} director{'y' if unresolved == 1 else 'ies'} not mapped")
