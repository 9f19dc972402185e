"""Progress bar for long-running operations."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from razlib.ui.core import console


@contextmanager
def progress_context(
    description: str = "Processing",
    total: int | None = None,
) -> Generator[tuple[Progress, TaskID], None, None]:
    """Context manager for Rich progress bar.

    Args:
        description: Initial description for the progress bar
        total: Total number of items (None for indeterminate spinner)

    Yields:
        Tuple of (Progress instance, TaskID) for updates

    Example:
        >>> with progress_context("Uploading", total=10) as (progress, task):
        ...     for item in items:
        ...         progress.update(task, advance=1)
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    with progress:
        task = progress.add_task(f"[cyan]{description}[/]", total=total)
        yield progress, task
