"""Structured logging for Ring Hunter.

structlog events are routed through the standard logging module to up to
two sinks: a rich console on stderr whose level follows ``-v``, and an
optional ``debug.jsonl`` file that records every event.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import Processor

DEBUG_LOG_NAME = "debug.jsonl"

_CONSOLE_LEVELS = {0: logging.WARNING, 1: logging.INFO}

_configured = False
_file_handler: logging.FileHandler | None = None
_logs_dir: Path | None = None


def _record_to_entry(record: logging.LogRecord) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "level": record.levelname,
        "logger": record.name,
    }
    if not isinstance(record.msg, dict):
        entry["message"] = record.getMessage()
        return entry

    # structlog passes its event dict through as record.msg
    fields = {k: v for k, v in record.msg.items() if k not in ("level", "timestamp")}
    entry["message"] = fields.pop("event", "")
    entry.update(fields)
    return entry


class JSONLFileHandler(logging.FileHandler):
    """FileHandler whose records are single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(_record_to_entry(record), default=str)

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def _drop_rendered_by_rich(
    _logger: Any, _method: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    # RichHandler prints its own level and time columns
    event_dict.pop("level", None)
    event_dict.pop("timestamp", None)
    return event_dict


def _console_handler(verbosity: int) -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        level=_CONSOLE_LEVELS.get(verbosity, logging.DEBUG),
        rich_tracebacks=True,
        tracebacks_show_locals=verbosity >= 2,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _drop_rendered_by_rich,
                structlog.dev.ConsoleRenderer(colors=False),
            ]
        )
    )
    return handler


def _open_file_sink(log_dir: Path) -> JSONLFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = JSONLFileHandler(str(log_dir / DEBUG_LOG_NAME), mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(
    verbosity: int = 0,
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Configure logging for Ring Hunter.

    Safe to call more than once; a previously opened log file is closed.

    Args:
        verbosity: Console level. 0=WARNING, 1=INFO, 2+=DEBUG.
        log_to_file: Also append every event to ``log_dir/debug.jsonl``.
        log_dir: Directory for the JSONL log. Required if log_to_file=True.

    Raises:
        ValueError: If log_to_file=True but log_dir is not provided.
    """
    global _configured, _file_handler, _logs_dir

    if log_to_file and log_dir is None:
        raise ValueError("log_dir is required when log_to_file=True")

    close_file_logging()
    _logs_dir = None

    handlers: list[logging.Handler] = [_console_handler(verbosity)]
    if log_to_file and log_dir is not None:
        _file_handler = _open_file_sink(log_dir)
        _logs_dir = log_dir
        handlers.append(_file_handler)

    # The root logger stays open whenever any sink wants more than warnings;
    # each handler applies its own threshold.
    root_level = logging.DEBUG if (verbosity > 0 or log_to_file) else logging.WARNING
    logging.basicConfig(level=root_level, format="%(message)s", handlers=handlers, force=True)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger, configuring defaults on first use."""
    if not _configured:
        configure_logging()

    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger


def get_logs_dir() -> Path | None:
    """Return the JSONL log directory, or None when file logging is off."""
    return _logs_dir


def close_file_logging() -> None:
    """Close the JSONL file handler, if one is open."""
    global _file_handler
    if _file_handler is not None:
        _file_handler.close()
        _file_handler = None
