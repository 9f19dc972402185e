"""Service commands.

Commands: serve, remote
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape

from razlib.cli._app import SERVICE_COMMANDS
from razlib.cli._context import get_runtime_context
from razlib.exceptions import CatalogServiceError
from razlib.ui import console, print_books_table, print_error, print_remote_levels_table


def register_service_commands(app: typer.Typer) -> None:
    """Register service commands on the app."""

    @app.command(rich_help_panel=SERVICE_COMMANDS)
    def serve(
        ctx: typer.Context,
        host: Annotated[
            str | None,
            typer.Option("--host", help="Bind address (default: server.host)."),
        ] = None,
        port: Annotated[
            int | None,
            typer.Option("--port", "-p", help="Port (default: server.port)."),
        ] = None,
    ) -> None:
        """Run the catalog API with uvicorn.

        Serves from the bucket when R2 credentials are set, otherwise from
        the local library roots.
        """
        import uvicorn

        from razlib.api import create_app

        runtime = get_runtime_context(ctx)
        server = runtime.settings.server
        app_instance = create_app(runtime.settings)

        bind_host = host or server.host
        bind_port = port or server.port
        console.print(f"[step]Serving catalog API[/] on http://{bind_host}:{bind_port}")
        uvicorn.run(
            app_instance,
            host=bind_host,
            port=bind_port,
            log_level="debug" if runtime.verbose else "info",
        )

    @app.command(rich_help_panel=SERVICE_COMMANDS)
    def remote(
        ctx: typer.Context,
        level: Annotated[
            str | None,
            typer.Argument(help="Level code; omit to list all levels."),
        ] = None,
        url: Annotated[
            str,
            typer.Option("--url", "-u", envvar="RAZLIB_URL", help="Catalog service base URL."),
        ] = "http://127.0.0.1:8787",
        timeout: Annotated[
            float,
            typer.Option("--timeout", help="Request timeout in seconds."),
        ] = 30.0,
    ) -> None:
        """Fetch levels or one level's books from a deployed service.

        [bold]Examples:[/]
          razlib remote --url https://raz.example.dev
          razlib remote A --url https://raz.example.dev
        """
        from razlib.client import CatalogClient

        get_runtime_context(ctx)
        try:
            with CatalogClient(url, timeout=timeout) as client:
                if level is None:
                    print_remote_levels_table(client.get_levels())
                else:
                    code = level.strip().upper()
                    print_books_table(client.get_books(code), title=f"Level {code} ({url})")
        except CatalogServiceError as e:
            print_error(escape(e.message))
            raise typer.Exit(1) from e
