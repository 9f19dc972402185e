"""App configuration, callbacks, and shared types for CLI.

This module contains the Typer application factory, the main callback and
the option aliases shared across commands.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from razlib import __version__
from razlib.catalog.assembler import Numbering
from razlib.exceptions import ConfigurationError
from razlib.ui import console, print_error

logger = logging.getLogger(__name__)

# =============================================================================
# Help Panel Names
# =============================================================================

CATALOG_COMMANDS = "Catalog"
STORAGE_COMMANDS = "Object Storage"
SERVICE_COMMANDS = "Service"


# =============================================================================
# Shared Option Types
# =============================================================================


def normalize_level_callback(values: list[str] | None) -> list[str] | None:
    """Upper-case level codes so "z1" and "Z1" are the same level."""
    if values is None:
        return None
    return [value.strip().upper() for value in values if value.strip()]


LevelsOpt = Annotated[
    list[str] | None,
    typer.Option(
        "--level",
        "-l",
        callback=normalize_level_callback,
        help="Restrict to this level code (repeatable).",
    ),
]

NumberingOpt = Annotated[
    Numbering | None,
    typer.Option(
        "--numbering",
        help="Display numbers for numberless PDFs (default: config catalog.numbering).",
        case_sensitive=False,
    ),
]

TitleFallbackOpt = Annotated[
    bool | None,
    typer.Option(
        "--title-fallback/--no-title-fallback",
        help="Pair audio by title alone when the numbered key misses.",
    ),
]


# =============================================================================
# Version Callback
# =============================================================================


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]razlib[/] v{__version__}")
        raise typer.Exit()


# =============================================================================
# App Factory
# =============================================================================


MAIN_EPILOG = """
[bold cyan]Quick Start Workflow:[/]
  [dim]1.[/] razlib levels          [dim]# Check directory → level mapping[/]
  [dim]2.[/] razlib build           [dim]# Write books.json[/]
  [dim]3.[/] razlib upload --dry-run [dim]# Preview bucket upload[/]
  [dim]4.[/] razlib serve           [dim]# Run the catalog API[/]
"""


def make_app() -> typer.Typer:
    """Create and configure the main Typer application."""
    return typer.Typer(
        name="razlib",
        help="Leveled reading library - catalog builder, uploader and API",
        epilog=MAIN_EPILOG,
        rich_markup_mode="rich",
        pretty_exceptions_enable=True,
        pretty_exceptions_show_locals=False,
        no_args_is_help=True,
        add_completion=False,
        context_settings={"help_option_names": ["-h", "--help"]},
    )


# =============================================================================
# Main Callback Factory
# =============================================================================


def create_main_callback(app: typer.Typer) -> None:
    """Register the main callback on the app."""

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                "-V",
                callback=version_callback,
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option(
                "--verbose",
                "-v",
                help="Enable verbose (DEBUG) logging.",
            ),
        ] = False,
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to config.yaml (default: config/config.yaml if present).",
                exists=False,
            ),
        ] = None,
    ) -> None:
        """Leveled reading library tools.

        Pairs every book PDF with its narration audio, writes the per-level
        catalog and serves it over HTTP.
        """
        from razlib.cli._context import RuntimeContext
        from razlib.config import reload_settings, validate_settings
        from razlib.logging_setup import setup_logging

        try:
            settings = reload_settings(config_file=config, validate=False)
        except FileNotFoundError as e:
            print_error(escape(str(e)))
            raise typer.Exit(1) from e
        except ConfigurationError as e:
            print_error(escape(e.message))
            raise typer.Exit(1) from e

        setup_logging(
            log_level="DEBUG" if verbose else settings.log_level,
            log_file=settings.paths.log_file,
            rich_console=True,
            quiet_console=not verbose,
        )

        try:
            for warning in validate_settings(settings):
                logger.debug(warning)
        except ConfigurationError as e:
            print_error(escape(e.message))
            raise typer.Exit(1) from e

        ctx.obj = RuntimeContext(settings=settings, config_path=config, verbose=verbose)
