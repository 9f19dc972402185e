"""Runtime context for CLI commands.

Initialized once in the main callback and available to every command via
ctx.obj. Library sources are created lazily so commands that never touch
the bucket never need credentials.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from razlib.ui import print_error

if TYPE_CHECKING:
    from razlib.config import Settings
    from razlib.sources import BucketLibrary, LocalLibrary

logger = logging.getLogger(__name__)


@dataclass
class RuntimeContext:
    """Typed runtime context available to all commands via ctx.obj.

    Example:
        @app.command()
        def my_command(ctx: typer.Context) -> None:
            runtime = get_runtime_context(ctx)
            library = runtime.local_library()
    """

    settings: Settings
    config_path: Path | None = None
    verbose: bool = False

    _local: LocalLibrary | None = field(default=None, repr=False)
    _bucket: BucketLibrary | None = field(default=None, repr=False)

    def local_library(self) -> LocalLibrary:
        """Local library from paths.pdf_root / paths.audio_root (lazy-loaded).

        Exits with code 1 when either root is not configured.
        """
        if self._local is None:
            from razlib.sources import LocalLibrary

            paths = self.settings.paths
            missing = [name for name in ("pdf_root", "audio_root") if getattr(paths, name) is None]
            if missing:
                print_error(f"Set {' and '.join('paths.' + m for m in missing)} in config.yaml")
                raise typer.Exit(1)
            self._local = LocalLibrary(
                paths.pdf_root,
                paths.audio_root,
                self.settings.levels,
                pdf_prefix=self.settings.storage.pdf_prefix,
                audio_prefix=self.settings.storage.audio_prefix,
            )
        return self._local

    def bucket_library(self) -> BucketLibrary:
        """Bucket library from storage settings (lazy-loaded).

        Exits with code 1 when credentials are missing.
        """
        if self._bucket is None:
            from razlib.sources import BucketLibrary

            if not self.settings.storage.configured:
                print_error(
                    "Object storage is not configured "
                    "(set R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY)"
                )
                raise typer.Exit(1)
            self._bucket = BucketLibrary.from_config(self.settings.storage)
        return self._bucket


def get_runtime_context(ctx: typer.Context) -> RuntimeContext:
    """Get RuntimeContext from a Typer context, walking up to the root."""
    root = ctx.find_root()
    if not isinstance(root.obj, RuntimeContext):
        raise RuntimeError("RuntimeContext not initialized (main callback did not run)")
    return root.obj
