"""
Logging configuration for the DeviceGuard API.
Console output is colored; file output goes through a QueueHandler so
that log writes never block the event loop.

- QueueListener handles file I/O in a separate thread
- Every record carries the request correlation ID ("-" outside requests)
- database.log receives only SQLAlchemy, repository and service records
"""

import atexit
import logging
import logging.handlers
import queue
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

from core.middleware.correlation import CorrelationIdFilter

# Global queue listener for cleanup
_queue_listener: Optional[logging.handlers.QueueListener] = None

DATABASE_LOGGERS = ("sqlalchemy", "repositories", "services", "core.decorators", "core.database")


class LogConfig(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    enable_file_logging: bool = True
    log_dir: str = "logs"
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    enable_console: bool = True


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    # Color codes
    grey = "\x1b[38;21m"
    yellow = "\x1b[33;21m"
    red = "\x1b[31;21m"
    bold_red = "\x1b[31;1m"
    blue = "\x1b[34;21m"
    reset = "\x1b[0m"

    COLORS = {
        logging.DEBUG: grey,
        logging.INFO: blue,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def format(self, record):
        # Color a copy so file handlers still see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, self.grey)
        record.levelname = f"{color}{record.levelname}{self.reset}"
        return f"{super().format(record)}{self.reset}"


class NamePrefixFilter(logging.Filter):
    """Pass only records whose logger name starts with one of the prefixes."""

    def __init__(self, prefixes):
        super().__init__()
        self.prefixes = tuple(prefixes)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.startswith(self.prefixes)


def _rotating_handler(config: LogConfig, filename: str, formatter: logging.Formatter):
    handler = logging.handlers.RotatingFileHandler(
        Path(config.log_dir) / filename,
        maxBytes=config.max_file_size,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setLevel(getattr(logging, config.level.upper()))
    handler.setFormatter(formatter)
    return handler


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """Setup application logging with configuration.

    - Uses QueueHandler for all file handlers to prevent blocking
    - QueueListener runs in separate thread for file I/O
    - Console handler remains direct (stdout is non-blocking)
    """
    global _queue_listener

    if config is None:
        config = LogConfig()

    # Stop existing listener if running
    stop_queue_listener()

    level = getattr(logging, config.level.upper())
    correlation_filter = CorrelationIdFilter()

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if config.enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.addFilter(correlation_filter)
        console_handler.setFormatter(
            ColoredFormatter(
                fmt="%(asctime)s | %(name)s | %(levelname)s | %(correlation_id)s | %(message)s",
                datefmt=config.date_format,
            )
        )
        root_logger.addHandler(console_handler)

    file_handlers: List[logging.Handler] = []

    if config.enable_file_logging:
        Path(config.log_dir).mkdir(parents=True, exist_ok=True)

        file_formatter = logging.Formatter(
            fmt=(
                "%(asctime)s | %(name)s | %(levelname)s | %(correlation_id)s | "
                "%(funcName)s:%(lineno)d | %(message)s"
            ),
            datefmt=config.date_format,
        )

        file_handlers.append(_rotating_handler(config, "app.log", file_formatter))

        db_handler = _rotating_handler(config, "database.log", file_formatter)
        db_handler.addFilter(NamePrefixFilter(DATABASE_LOGGERS))
        file_handlers.append(db_handler)

    if file_handlers:
        log_queue = queue.Queue(-1)

        # The filter runs on the request's task, before the record is queued,
        # so the correlation ID is captured while the context var is set
        queue_handler = logging.handlers.QueueHandler(log_queue)
        queue_handler.addFilter(correlation_filter)
        root_logger.addHandler(queue_handler)

        _queue_listener = logging.handlers.QueueListener(
            log_queue,
            *file_handlers,
            respect_handler_level=True,
        )
        _queue_listener.start()

        atexit.register(stop_queue_listener)

    # Respect PERFORMANCE_ENABLE_QUERY_LOGGING for the SQLAlchemy engine logger
    from .config import settings

    sqlalchemy_logger = logging.getLogger("sqlalchemy.engine")
    if settings.performance.enable_query_logging:
        sqlalchemy_logger.setLevel(level)
    else:
        sqlalchemy_logger.setLevel(logging.WARNING)


def stop_queue_listener() -> None:
    """Stop the queue listener gracefully.

    Called automatically on exit via atexit.
    Can also be called manually during shutdown.
    """
    global _queue_listener

    if _queue_listener:
        _queue_listener.stop()
        _queue_listener = None
