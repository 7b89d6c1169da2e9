"""
Logging setup and configuration utilities.

This module provides centralized logging configuration using loguru
with support for file rotation and structured logging. Records emitted
through the standard ``logging`` module are routed into loguru.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

from loguru import logger as loguru_logger

from ..config.models import LoggingConfig


class InterceptHandler(logging.Handler):
    """Forward standard-library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Any = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage())


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup application logging with the given configuration.

    Args:
        config: Logging configuration
    """
    loguru_logger.remove()

    if config.console_enabled:
        loguru_logger.add(
            sys.stderr,
            format=config.format,
            level=config.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=False
        )

    if config.file_enabled:
        log_dir = Path(config.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        loguru_logger.add(
            log_dir / "uploader.log",
            format=config.format,
            level=config.level.upper(),
            rotation=config.max_file_size,
            retention=config.backup_count,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


class LoggingManager:
    """
    Helpers for structured logging on top of loguru.
    """

    def __init__(self, config: LoggingConfig) -> None:
        self._config = config

    @property
    def config(self) -> LoggingConfig:
        return self._config

    def describe(self) -> Dict[str, Any]:
        """Summarize the active logging configuration."""
        log_dir = Path(self._config.log_directory)
        return {
            'log_level': self._config.level,
            'log_directory': str(log_dir),
            'log_directory_exists': log_dir.exists(),
            'console_enabled': self._config.console_enabled,
            'file_enabled': self._config.file_enabled,
            'max_file_size': self._config.max_file_size,
            'backup_count': self._config.backup_count
        }

    def log_structured(self, level: str, message: str, **kwargs: Any) -> None:
        """
        Log a structured message with additional context.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            message: Log message
            **kwargs: Additional structured data bound to the record
        """
        loguru_logger.bind(**kwargs).log(level.upper(), message)
