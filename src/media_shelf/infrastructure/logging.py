"""Logging configuration and setup."""

import logging
import logging.handlers
import sys
from pathlib import Path

from ..config.models import LoggingConfig

# Chatty libraries that only matter when debugging TMDb traffic
_QUIET_LOGGERS = ("aiohttp", "asyncio")


def setup_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Set up logging configuration.

    Log records go to stderr so that stdout carries only command output,
    such as player commands meant to be piped into a shell.

    Args:
        config: Logging configuration.
        verbose: Force DEBUG level regardless of the configured one.
    """
    level = logging.DEBUG if verbose else getattr(logging, config.level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if not verbose:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.debug(f"Logging configured with level {logging.getLevelName(level)}")


class LoggerMixin:
    """Mixin class that provides logging functionality."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        return logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
