"""Logging for SouqLink.

structlog renders key/value events on top of the standard library's
handlers. Console output is always on; set ``LOG_DIR`` to also keep rotating
log files (``souqlink.log`` plus ``souqlink_error.log`` for errors only).
Production and staging render JSON lines, everything else a readable console
format.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
JSON_ENVS = ("production", "staging")
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5
QUIET_LOGGERS = ("asyncio", "protean", "sqlalchemy.engine", "multipart")


def current_env() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENV.get(current_env(), "INFO")).upper()


def _file_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def _handlers(level: str, log_dir: str | None, prefix: str) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers = [console]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(directory / f"{prefix}.log", level))
        handlers.append(_file_handler(directory / f"{prefix}_error.log", logging.ERROR))
    return handlers


def _processors(env: str) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if env in JSON_ENVS:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(level: str | None = None, log_dir: str | None = None, log_file_prefix: str = "souqlink") -> None:
    """Wire the root logger and structlog. Safe to call more than once."""
    log_level = (level or get_log_level()).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = _handlers(log_level, log_dir or os.getenv("LOG_DIR"), log_file_prefix)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=_processors(current_env()),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values (request id, path) to every event logged on this task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
