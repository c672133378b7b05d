"""Logging for lsp_sessions.

Library modules only create loggers below ``lsp_sessions``; nothing is
printed until ``setup_logging`` installs handlers (the CLI does, embedding
applications may). Session and installer messages carry ``session_id``,
``root_dir``, ``server_name`` and ``path`` as record attributes, which the
JSON formatter copies into each entry.
"""

import json
import logging
import logging.handlers
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

LOGGER_NAME = "lsp_sessions"

# Record attributes copied into JSON entries when present.
CONTEXT_FIELDS = ("session_id", "root_dir", "server_name", "path")


class LogCategory(Enum):
    """Component loggers, named ``lsp_sessions.<value>``."""

    PATHS = "paths"
    ROOTS = "roots"
    SESSIONS = "sessions"
    INSTALL = "install"


def session_extra(**context: Any) -> dict[str, Any]:
    """Build an ``extra=`` mapping from the known context fields.

    Unknown keys and None values are dropped.

    Example:
        logger.info("Session started", extra=session_extra(session_id=3, root_dir=root))
    """
    return {
        key: value
        for key, value in context.items()
        if key in CONTEXT_FIELDS and value is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with session context when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _console_level(level: str, quiet: bool, verbose: bool) -> str:
    if quiet:
        return "ERROR"
    if verbose:
        return "DEBUG"
    return level.upper()


def _file_handler(
    log_file: Path, log_format: str, rotation_count: int, max_bytes: int
) -> dict[str, Any]:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json" if log_format == "json" else "detailed",
        "level": "DEBUG",
        "filename": str(log_file),
        "maxBytes": max_bytes,
        "backupCount": rotation_count,
    }


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 10485760,
) -> "logging.Logger":
    """Install handlers on the ``lsp_sessions`` logger.

    The console handler writes to stderr at ``level`` (ERROR when quiet,
    DEBUG when verbose). A log file, when given, always records DEBUG
    through a rotating handler in text or JSON form.

    Args:
        level: Console level (DEBUG, INFO, WARNING, ERROR).
        quiet: Only show errors on the console.
        verbose: Show debug output on the console.
        log_file: Optional rotating log file.
        log_format: File format, "text" or "json".
        rotation_count: Number of rotated files kept.
        max_bytes: Size at which the file rotates.

    Returns:
        The ``lsp_sessions`` logger.
    """
    import logging.config

    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
            "level": _console_level(level, quiet, verbose),
            "stream": "ext://sys.stderr",
        }
    }
    if log_file:
        handlers["file"] = _file_handler(log_file, log_format, rotation_count, max_bytes)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "detailed": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "simple": {"format": "%(levelname)s | %(message)s"},
                "json": {"()": JSONFormatter},
            },
            "handlers": handlers,
            "loggers": {
                LOGGER_NAME: {
                    "handlers": list(handlers),
                    "level": "DEBUG",
                    "propagate": False,
                }
            },
        }
    )
    return logging.getLogger(LOGGER_NAME)


def get_logger() -> "logging.Logger":
    """The top-level ``lsp_sessions`` logger."""
    return logging.getLogger(LOGGER_NAME)


def get_category_logger(category: LogCategory) -> "logging.Logger":
    """Logger for one component, e.g. ``lsp_sessions.sessions``."""
    return logging.getLogger(f"{LOGGER_NAME}.{category.value}")


@contextmanager
def debug_context(
    logger: "logging.Logger | None" = None,
) -> Generator["logging.Logger", None, None]:
    """Lower a logger and its handlers to DEBUG inside the block.

    Useful for tracing a single root lookup:

        with debug_context():
            find_git_ancestor("/work/app/src/main.py")
    """
    target = logger or get_logger()
    saved = [(target, target.level)] + [(h, h.level) for h in target.handlers]
    try:
        for item, _ in saved:
            item.setLevel(logging.DEBUG)
        yield target
    finally:
        for item, item_level in saved:
            item.setLevel(item_level)
