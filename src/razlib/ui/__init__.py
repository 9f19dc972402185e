"""razlib UI - Rich console output components.

Modules:
    core: Console instances and theme
    messages: Simple print helpers (success, error, warning, info)
    tables: Book, catalog summary and directory resolution tables
    progress: Progress bar for uploads

Usage:
    from razlib.ui import console, print_success
    from razlib.ui.tables import print_books_table
"""

from __future__ import annotations

from razlib.ui.core import RAZLIB_THEME, console, err_console
from razlib.ui.messages import (
    print_dry_run,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from razlib.ui.progress import progress_context
from razlib.ui.tables import (
    print_books_table,
    print_build_summary,
    print_remote_levels_table,
    print_report_details,
    print_resolution_table,
)

__all__ = [
    "RAZLIB_THEME",
    "console",
    "err_console",
    "print_books_table",
    "print_build_summary",
    "print_dry_run",
    "print_error",
    "print_info",
    "print_remote_levels_table",
    "print_report_details",
    "print_resolution_table",
    "print_success",
    "print_warning",
    "progress_context",
]
