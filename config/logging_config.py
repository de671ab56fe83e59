"""
Centralized logging configuration for the docs edge site and the sync job.

This module provides a function to set up application-wide logging,
including formatting, log levels, and handlers for console and file output.
"""

import logging
import logging.handlers  # Required for RotatingFileHandler
import sys
import json
from pathlib import Path
from typing import Optional


class StructuredLogFormatter(logging.Formatter):
    """
    Custom formatter that renders each record as a single JSON line.

    Features:
    - Includes component if present in extra fields (e.g. "asset_router", "webflow_sync")
    - Merges a free-form `extra_fields` dict when a caller passes one
    - Preserves standard log fields (timestamp, level, logger, message)
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        if hasattr(record, 'component'):
            log_data['component'] = record.component

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


class _MaxLevelFilter(logging.Filter):
    """Pass only records strictly below the given level."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record):
        return record.levelno < self.max_level


DEFAULT_LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str, component: str) -> logging.LoggerAdapter:
    """
    Get a logger whose records carry a fixed `component` field.

    Args:
        name (str): Logger name (usually __name__)
        component (str): Component tag rendered by StructuredLogFormatter

    Returns:
        logging.LoggerAdapter: Adapter that injects the component into every record
    """
    return logging.LoggerAdapter(logging.getLogger(name), {'component': component})


def setup_app_logging(config: Optional[dict] = None, default_level=logging.INFO) -> None:
    """
    Set up logging for the entire application.

    This function configures the root logger with two console handlers and an optional
    rotating file handler. Records below WARNING go to stdout, WARNING and above go to
    stderr, so a failing sync run reports its error on the error stream while routine
    progress lines stay on stdout.

    Args:
        config (dict, optional): A dictionary containing logging configurations.
                                Expected keys:
                                - 'level': String representation of log level (e.g., "DEBUG", "INFO").
                                - 'file_path': Path to the log file; empty disables file logging.
                                - 'max_bytes': Max size of the log file before rotation.
                                - 'backup_count': Number of backup log files to keep.
                                - 'date_format': Custom log date format string.
        default_level (int, optional): The default logging level if not specified
                                     in the config. Defaults to logging.INFO.
    """
    if config is None:
        config = {}

    log_level_str = str(config.get('level', logging.getLevelName(default_level))).upper()
    numeric_log_level = getattr(logging, log_level_str, default_level)
    if not isinstance(numeric_log_level, int):
        print(f"Warning: Invalid log level string '{log_level_str}'. Using default level {logging.getLevelName(default_level)}.", file=sys.stderr)
        numeric_log_level = default_level

    formatter = StructuredLogFormatter(datefmt=config.get('date_format', DEFAULT_LOG_DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_log_level)

    # Remove any existing handlers
    if root_logger.hasHandlers():
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_MaxLevelFilter(logging.WARNING))
    root_logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)
    root_logger.addHandler(stderr_handler)

    log_file_path = config.get('file_path')
    if log_file_path:
        try:
            Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file_path,
                maxBytes=int(config.get('max_bytes', 5*1024*1024)),
                backupCount=int(config.get('backup_count', 3)),
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"Error setting up file logging to {log_file_path}: {e}. File logging will be disabled.", file=sys.stderr)

    logging.getLogger("LoggingConfig").debug("Application logging setup complete. Level: %s", log_level_str)
