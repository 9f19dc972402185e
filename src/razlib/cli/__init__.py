"""razlib CLI - command-line interface built with Typer and Rich.

Commands are grouped into help panels:
- Catalog (build, show, levels)
- Object Storage (upload, check)
- Service (serve, remote)
"""

from __future__ import annotations

from razlib.cli._app import (
    CATALOG_COMMANDS,
    SERVICE_COMMANDS,
    STORAGE_COMMANDS,
    create_main_callback,
    make_app,
)
from razlib.cli._context import RuntimeContext, get_runtime_context
from razlib.cli.catalog import register_catalog_commands
from razlib.cli.service import register_service_commands
from razlib.cli.storage import register_storage_commands

app = make_app()

# Register main callback (handles --version, --verbose, --config)
create_main_callback(app)

register_catalog_commands(app)
register_storage_commands(app)
register_service_commands(app)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> int:
    """Main entry point for the CLI."""
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0


__all__ = [
    "app",
    "main",
    "RuntimeContext",
    "get_runtime_context",
    "CATALOG_COMMANDS",
    "STORAGE_COMMANDS",
    "SERVICE_COMMANDS",
]
