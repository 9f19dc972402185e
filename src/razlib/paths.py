"""Cross-platform default locations using platformdirs.

Override with RAZLIB_DATA_DIR / RAZLIB_LOG_DIR environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from platformdirs import user_data_dir, user_log_dir

APP_NAME = "razlib"
APPAUTHOR: Literal[False] = False  # Avoid "CompanyName/AppName" nesting on Windows


def _env_override(env_var: str) -> Path | None:
    v = os.environ.get(env_var)
    return Path(v).expanduser() if v else None


def data_dir(*, ensure: bool = False) -> Path:
    """Application data directory (default home of books.json)."""
    d = _env_override("RAZLIB_DATA_DIR") or Path(user_data_dir(APP_NAME, APPAUTHOR))
    if ensure:
        d.mkdir(parents=True, exist_ok=True)
    return d


def log_dir(*, ensure: bool = False) -> Path:
    """Application log directory."""
    d = _env_override("RAZLIB_LOG_DIR") or Path(user_log_dir(APP_NAME, APPAUTHOR))
    if ensure:
        d.mkdir(parents=True, exist_ok=True)
    return d


def default_log_file() -> Path:
    return log_dir() / "razlib.log"
