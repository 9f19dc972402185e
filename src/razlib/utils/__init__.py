"""Utility modules for razlib."""

from razlib.utils.retry import NETWORK_EXCEPTIONS, STORAGE_EXCEPTIONS, retry_with_backoff

__all__ = [
    "NETWORK_EXCEPTIONS",
    "STORAGE_EXCEPTIONS",
    "retry_with_backoff",
]
