"""Object storage commands.

Commands: upload, check
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape

from razlib.cli._app import STORAGE_COMMANDS, LevelsOpt
from razlib.cli._context import get_runtime_context
from razlib.exceptions import StorageError
from razlib.levels import FileKind
from razlib.ui import (
    console,
    print_dry_run,
    print_error,
    print_info,
    print_success,
    print_warning,
    progress_context,
)
from razlib.upload import upload_missing


def register_storage_commands(app: typer.Typer) -> None:
    """Register object storage commands on the app."""

    @app.command(rich_help_panel=STORAGE_COMMANDS)
    def upload(
        ctx: typer.Context,
        level: LevelsOpt = None,
        concurrency: Annotated[
            int | None,
            typer.Option(
                "--concurrency",
                "-j",
                min=1,
                max=64,
                help="Parallel uploads (default: upload.concurrency).",
            ),
        ] = None,
        dry_run: Annotated[
            bool,
            typer.Option("--dry-run", help="List what would be uploaded without uploading."),
        ] = False,
    ) -> None:
        """Upload local PDFs and audio that are missing from the bucket.

        Keys are [cyan]pdf/{level}/{file}[/] and [cyan]audio/{level}/{file}[/];
        objects already in the bucket are skipped.

        [bold]Examples:[/]
          razlib upload --dry-run
          razlib upload -l A -j 8
        """
        runtime = get_runtime_context(ctx)
        local = runtime.local_library()
        bucket = runtime.bucket_library()
        upload_settings = runtime.settings.upload

        try:
            with progress_context("Uploading") as (progress, task):

                def advance(_item: object) -> None:
                    progress.update(task, advance=1)

                summary = upload_missing(
                    local,
                    bucket,
                    levels=level,
                    concurrency=concurrency or upload_settings.concurrency,
                    max_retries=upload_settings.max_retries,
                    dry_run=dry_run,
                    on_progress=advance,
                )
        except StorageError as e:
            print_error(escape(e.message))
            raise typer.Exit(1) from e

        if dry_run:
            for key in summary.uploaded:
                print_dry_run(f"Would upload {escape(key)}")
        for failure in summary.failed:
            print_error(escape(failure.error))

        if summary.ok:
            print_success(summary.summary())
        else:
            print_warning(summary.summary())
            raise typer.Exit(1)

    @app.command(rich_help_panel=STORAGE_COMMANDS)
    def check(
        ctx: typer.Context,
        level: Annotated[str, typer.Argument(help="Level code (e.g. A, Z1).")],
        limit: Annotated[
            int,
            typer.Option("--limit", "-n", min=1, help="Keys to show per kind."),
        ] = 5,
    ) -> None:
        """List the first bucket objects of a level (PDF and audio).

        Quick sanity check that an upload landed under the expected keys.
        """
        runtime = get_runtime_context(ctx)
        bucket = runtime.bucket_library()
        code = level.strip().upper()

        for kind in FileKind:
            prefix = bucket.level_prefix(code, kind)
            try:
                keys = bucket.list_keys(prefix, level=code)
            except StorageError as e:
                print_error(escape(e.message))
                raise typer.Exit(1) from e

            console.print(f"[step]{prefix}[/] [dim]({len(keys)} objects)[/]")
            for key in keys[:limit]:
                print_info(escape(key))
            if len(keys) > limit:
                console.print(f"    [dim]... and {len(keys) - limit} more[/]")
