"""Simple message printing helpers for razlib UI."""

from __future__ import annotations

from razlib.ui.core import console, err_console


def print_success(message: str) -> None:
    """Print a success message with checkmark.

    Example:
        >>> print_success("Catalog written")
          ✓ Catalog written
    """
    console.print(f"  [success]✓[/] {message}")


def print_error(message: str) -> None:
    """Print an error message with X to stderr."""
    err_console.print(f"  [error]✗[/] {message}")


def print_warning(message: str) -> None:
    """Print a warning message.

    Example:
        >>> print_warning("2 duplicate ids in level C")
          ! 2 duplicate ids in level C
    """
    console.print(f"  [warning]![/] {message}")


def print_info(message: str) -> None:
    console.print(f"  [info]→[/] {message}")


def print_dry_run(message: str) -> None:
    """Print a dry-run message.

    Example:
        >>> print_dry_run("Would upload pdf/A/01-Cat.pdf")
          [DRY RUN] Would upload pdf/A/01-Cat.pdf
    """
    console.print(f"  [warning][DRY RUN][/] {message}")
