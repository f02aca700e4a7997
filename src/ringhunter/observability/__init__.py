"""Observability module for Ring Hunter.

Provides structured logging for tree generation and hunts.
"""

from ringhunter.observability.logging import (
    close_file_logging,
    configure_logging,
    get_logger,
    get_logs_dir,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
    "get_logs_dir",
]
