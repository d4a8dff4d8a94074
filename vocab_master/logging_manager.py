"""Application logger: JSON lines to a rotating file, errors to the console.

Structured fields travel in ``extra`` (``event``, ``status``...) or come from
the scoped log context, so every record written while a request is being
served carries its ``request_token`` and, inside the cache, its ``cache_key``.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, List, Optional, TextIO

PROJECT_DIR = Path(__file__).resolve().parents[1]
LOG_DIR = Path(os.environ.get("VOCAB_MASTER_LOG_DIR") or PROJECT_DIR / "log")
LOG_FILE = LOG_DIR / "app.log"
LOGGER_NAME = "vocab_master"
DEFAULT_LOG_LEVEL = logging.INFO
CONSOLE_LOG_LEVEL = logging.ERROR
MAX_LOG_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 3

_logger: Optional[logging.Logger] = None
_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "vocab_master_log_context", default={}
)

# Attributes every LogRecord has; anything else on a record came from ``extra``
# or the log context.
_STANDARD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class JSONLogFormatter(logging.Formatter):
    """Render each record as one JSON object."""

    TOP_LEVEL_FIELDS: tuple[str, ...] = (
        "event",
        "status",
        "request_token",
        "cache_key",
        "duration_ms",
    )

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra: Dict[str, object] = {}
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRIBUTES:
                continue
            if key in self.TOP_LEVEL_FIELDS:
                if value is not None:
                    payload[key] = value
            else:
                extra[key] = value
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy the active log context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _context.get().items():
            setattr(record, key, value)
        return True


def _build_handlers() -> List[logging.Handler]:
    formatter = JSONLogFormatter()
    file_handler = RotatingFileHandler(LOG_FILE, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(CONSOLE_LOG_LEVEL)
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
    return [file_handler, console_handler]


def setup_logging(log_level: int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Create the application logger on first use; later calls only adjust its level."""
    global _logger
    if _logger is not None:
        configure_logging_level(log_level=log_level)
        return _logger

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.addFilter(LogContextFilter())
    for handler in _build_handlers():
        logger.addHandler(handler)
    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def configure_logging_level(debug_enabled: bool = False, log_level: Optional[int] = None) -> int:
    """Set the logger and file level; the console only follows when debugging."""
    logger = get_logger()
    level = log_level if log_level is not None else (
        logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    )
    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) or debug_enabled:
            handler.setLevel(level)
    return level


def get_log_context() -> Dict[str, object]:
    return dict(_context.get())


def push_log_context(**values: object) -> contextvars.Token[Dict[str, object]]:
    """Add non-``None`` ``values`` to the context; pass the token to :func:`pop_log_context`."""
    merged = dict(_context.get())
    merged.update({key: value for key, value in values.items() if value is not None})
    return _context.set(merged)


def pop_log_context(token: contextvars.Token[Dict[str, object]]) -> None:
    _context.reset(token)


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Scope ``values`` to the records logged inside the ``with`` block."""
    token = push_log_context(**values)
    try:
        yield
    finally:
        pop_log_context(token)


def clear_log_context() -> None:
    _context.set({})


def _console(
    level: int,
    stream: TextIO,
    message: str,
    args: tuple,
    logger_obj: Optional[logging.Logger],
) -> None:
    print(message % args if args else message, file=stream)
    (logger_obj or get_logger()).log(level, message, *args, extra={"event": "console.output"})


def console_info(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    """Print ``message`` for the user on stdout and record it in the log."""
    _console(logging.INFO, sys.stdout, message, args, logger_obj)


def console_warning(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    _console(logging.WARNING, sys.stderr, message, args, logger_obj)


def console_error(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    # Recorded below CONSOLE_LOG_LEVEL so the console handler does not print it twice.
    _console(logging.WARNING, sys.stderr, message, args, logger_obj)


logger = get_logger()


__all__ = [
    "JSONLogFormatter",
    "LOGGER_NAME",
    "LogContextFilter",
    "clear_log_context",
    "configure_logging_level",
    "console_error",
    "console_info",
    "console_warning",
    "get_log_context",
    "get_logger",
    "log_context",
    "logger",
    "pop_log_context",
    "push_log_context",
    "setup_logging",
]
