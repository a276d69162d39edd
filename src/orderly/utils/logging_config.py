"""
Logging configuration for Orderly.

Console and optional file output use the standard library handlers. A
MemoryLogHandler keeps every record of the current run so callers can
inspect what happened without parsing log output.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "orderly"

_installed_handlers: List[logging.Handler] = []

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class LogEntry:
    """A single captured log record."""

    timestamp: str
    level: str
    message: str
    details: Optional[Dict[str, Any]] = field(default=None)


class DetailsFormatter(logging.Formatter):
    """Formatter that appends structured details as JSON.

    Details are passed with ``extra={"details": {...}}``.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        details = getattr(record, "details", None)
        if details:
            message = f"{message} {json.dumps(details, default=str, ensure_ascii=False)}"
        return message


class MemoryLogHandler(logging.Handler):
    """Append-only in-memory log buffer."""

    def __init__(self, level: int = logging.NOTSET):
        super().__init__(level)
        self._entries: List[LogEntry] = []

    def emit(self, record: logging.LogRecord):
        try:
            details = getattr(record, "details", None)
            self._entries.append(
                LogEntry(
                    timestamp=datetime.fromtimestamp(
                        record.created, tz=timezone.utc
                    ).isoformat(),
                    level=record.levelname.lower(),
                    message=record.getMessage(),
                    details=dict(details) if details else None,
                )
            )
        except Exception:
            self.handleError(record)

    def get_logs(self) -> List[LogEntry]:
        return list(self._entries)

    def clear_logs(self):
        self._entries.clear()


def resolve_level(log_level: Any) -> int:
    """Map a level name (debug, info, warn, error) or number to a logging level."""
    if isinstance(log_level, int):
        return log_level
    try:
        return LOG_LEVELS[str(log_level).lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {log_level}") from None


def setup_logging(
    log_level: Any = "info", log_file: Optional[str] = None
) -> logging.Logger:
    """Configure logging for the application.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_level: debug, info, warn or error
        log_file: Optional file that receives a copy of every record

    Returns:
        The package logger
    """
    level = resolve_level(log_level)
    logger = logging.getLogger(ROOT_LOGGER)
    teardown_logging()

    formatter = DetailsFormatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler(), MemoryLogHandler()]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed_handlers.append(handler)

    logger.setLevel(level)

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}")
    if log_file:
        logger.info(f"Logging to file: {log_file}")

    return logger


def teardown_logging():
    """Remove and close the handlers installed by setup_logging."""
    logger = logging.getLogger(ROOT_LOGGER)
    while _installed_handlers:
        handler = _installed_handlers.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def get_memory_handler() -> Optional[MemoryLogHandler]:
    for handler in logging.getLogger(ROOT_LOGGER).handlers:
        if isinstance(handler, MemoryLogHandler):
            return handler
    return None


def get_logs() -> List[LogEntry]:
    """Return the records captured since logging was set up."""
    handler = get_memory_handler()
    return handler.get_logs() if handler else []


def clear_logs():
    handler = get_memory_handler()
    if handler:
        handler.clear_logs()
