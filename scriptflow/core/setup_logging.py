# scriptflow/core/setup_logging.py
"""
Logging configuration module for scriptflow.
Provides logging setup with support for JSON formatting, file rotation, and syslog.

Diagnostics always go to stderr so that the user-facing output of the wrapper
scripts (usage text, flag summaries, output paths) stays alone on stdout.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler, SysLogHandler
from typing import Any, Callable, Dict, Optional, Union

from scriptflow.core.config import config


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Formats log records as JSON objects for better parsing and analysis.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as a JSON string.

        Args:
            record: Log record to format

        Returns:
            str: JSON formatted log entry
        """
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add custom fields if they exist
        custom_fields = ["script", "stage", "component", "pipeline"]
        for field in custom_fields:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False)


def setup_logging(
    name: str,
    log_file: Optional[str] = None,
    json_format: bool = False,
    log_level: Union[int, str] = logging.DEBUG,
    console_level: Union[int, str] = logging.INFO,
    file_level: Union[int, str] = logging.DEBUG,
    max_file_size: int = 10485760,  # 10MB
    backup_count: int = 5,
    use_syslog: bool = False,
) -> logging.Logger:
    """
    Configure logging for a given component.

    Args:
        name: Name of the logger (typically the component name)
        log_file: Log file name (optional, derived from ``name`` if not provided)
        json_format: If True, uses JSON formatting for logs
        log_level: Overall log level for the logger
        console_level: Log level for console output
        file_level: Log level for file output
        max_file_size: Maximum size of log file before rotation (in bytes)
        backup_count: Number of backup files to keep
        use_syslog: Also forward records to the local syslog socket

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers and propagation to parent loggers
    if logger.handlers:
        logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(log_level)

    formatter = _create_formatter(json_format)

    _add_console_handler(logger, formatter, console_level)

    if log_file is None:
        log_file = f'{name.lower().replace(" ", "_")}.log'
    _add_file_handler(
        logger,
        formatter,
        os.path.join(config.LOG_DIRECTORY, log_file),
        file_level,
        max_file_size,
        backup_count,
    )

    if use_syslog:
        _add_syslog_handler(logger, formatter)

    return logger


def _create_formatter(json_format: bool) -> logging.Formatter:
    """
    Create appropriate formatter based on format preference.

    Args:
        json_format: Whether to use JSON formatting

    Returns:
        logging.Formatter: Configured formatter instance
    """
    if json_format:
        return JSONFormatter()
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(module)s:%(funcName)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _add_console_handler(
    logger: logging.Logger, formatter: logging.Formatter, level: Union[int, str] = logging.INFO
) -> None:
    """
    Add a stderr handler to logger.

    Args:
        logger: Logger instance to add handler to
        formatter: Formatter for the handler
        level: Log level for console output
    """
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


def _add_file_handler(
    logger: logging.Logger,
    formatter: logging.Formatter,
    log_path: str,
    level: Union[int, str] = logging.DEBUG,
    max_bytes: int = 10485760,
    backup_count: int = 5,
) -> None:
    """
    Add rotating file handler to logger for persistent log storage.

    A log directory that cannot be created or written is reported on the
    console handler and otherwise ignored: the wrapper scripts must keep
    working on read-only machines.

    Args:
        logger: Logger instance to add handler to
        formatter: Formatter for the handler
        log_path: Path to the log file
        level: Log level for file output
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep
    """
    try:
        os.makedirs(os.path.dirname(log_path), exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError as e:
        logger.debug(f"File logging disabled, cannot write to {log_path}: {e}")
        return
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def _add_syslog_handler(
    logger: logging.Logger, formatter: logging.Formatter, syslog_address: str = "/dev/log"
) -> None:
    """
    Add syslog handler for system-level logging.

    Args:
        logger: Logger instance to add handler to
        formatter: Formatter for the handler
        syslog_address: Address for syslog (file path or network address)
    """
    try:
        syslog_handler = SysLogHandler(address=syslog_address)
        syslog_handler.setFormatter(formatter)
        logger.addHandler(syslog_handler)
    except (OSError, ConnectionError) as e:
        logger.warning(f"Syslog handler could not be configured: {e}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a child of the scriptflow logger.

    Args:
        name: Suffix of the logger to retrieve

    Returns:
        logging.Logger: Logger instance sharing the scriptflow handlers
    """
    return logging.getLogger(f"scriptflow.{name}")


class LogContext:
    """
    Context manager for adding contextual information to logs.

    Example:
        with LogContext(logger, pipeline="intro.json", stage="ff_scale1"):
            logger.info("Running stage")
    """

    def __init__(self, logger: logging.Logger, **context_fields: Any):
        """
        Initialize log context with additional fields.

        Args:
            logger: Logger instance to use
            **context_fields: Additional fields to include in logs
        """
        self.logger = logger
        self.context_fields = context_fields
        self.old_factory: Optional[Callable[..., logging.LogRecord]] = None

    def __enter__(self) -> "LogContext":
        self.old_factory = logging.getLogRecordFactory()

        def factory(*args, **kwargs):
            assert self.old_factory is not None
            record = self.old_factory(*args, **kwargs)
            for key, value in self.context_fields.items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.old_factory is not None:
            logging.setLogRecordFactory(self.old_factory)


def setup_default_logging(
    json_format: Optional[bool] = None, log_level: Optional[str] = None
) -> logging.Logger:
    """
    Set up default logging configuration for the application.

    Args:
        json_format: Whether to use JSON formatting (defaults to ``LOG_JSON``)
        log_level: Console log level (defaults to ``LOG_LEVEL``, DEBUG when ``DEBUG=1``)

    Returns:
        logging.Logger: The shared ``scriptflow`` logger
    """
    if json_format is None:
        json_format = config.LOG_JSON
    if log_level is None:
        log_level = "DEBUG" if config.DEBUG else config.LOG_LEVEL
    return setup_logging(
        name="scriptflow",
        json_format=json_format,
        console_level=log_level,
        use_syslog=config.LOG_SYSLOG,
    )


def get_uvicorn_log_config(json_format: bool = False) -> dict:
    """
    Get uvicorn log configuration for the pipeline server.

    Args:
        json_format: Whether to use JSON formatting

    Returns:
        dict: Uvicorn logging configuration
    """
    formatter = "json" if json_format else "default"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(asctime)s - %(name)s - %(levelname)s - %(client_addr)s - "%(request_line)s" %(status_code)s',
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {
            "default": {
                "formatter": formatter,
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
            "access": {
                "formatter": formatter,
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
        },
    }
