"""Logging configuration for razlib."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Global reference to console handler for level adjustment
_console_handler: logging.Handler | None = None

# Third-party loggers that flood DEBUG output (S3 wire logs, HTTP requests)
NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3", "httpx", "httpcore")


def setup_logging(
    log_level: str = "INFO",
    log_file: Path | str | None = None,
    rich_console: bool = True,
    quiet_console: bool = False,
) -> logging.Logger:
    """
    Configure logging for razlib.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output
        rich_console: Use rich handler for pretty console output
        quiet_console: If True, only show WARNING+ on console (for clean Rich UI)

    Returns:
        Package logger instance
    """
    global _console_handler
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger("razlib")
    logger.setLevel(level)
    logger.handlers.clear()

    file_format = logging.Formatter(
        "%(asctime)s | %(levelname)-5s | [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler: logging.Handler
    console_level = logging.WARNING if quiet_console else level
    if rich_console:
        console = Console(stderr=True)
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        console_handler.setLevel(console_level)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(console_handler)
    _console_handler = console_handler

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def set_console_quiet(quiet: bool = True) -> None:
    """
    Toggle quiet mode for console logging.

    When quiet, only WARNING and above are shown on console.
    INFO/DEBUG still go to log file if configured.
    """
    if _console_handler is not None:
        _console_handler.setLevel(logging.WARNING if quiet else logging.INFO)
