"""Logging configuration for Spotify Stats."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Optional, TextIO

import coloredlogs

if TYPE_CHECKING:
    from ..config.settings import LoggingConfig

LOGGER_NAME = "spotify_stats"

# APScheduler logs every job run at INFO, once per poll
SCHEDULER_LOGGER_NAME = "apscheduler"


def setup_logger(
    config: "LoggingConfig",
    console: bool = True,
    stream: Optional[TextIO] = None,
    name: str = LOGGER_NAME
) -> logging.Logger:
    """Configure the service logger from the ``logging`` settings section.

    Ticks run on scheduler worker threads, so the file format carries the
    thread name. Calling this again replaces the handlers, which is how the
    live display moves console output onto its own stdout proxy.

    Args:
        config: Log file path, level and rotation limits
        console: Whether to add a colored console handler
        stream: Console stream (defaults to stdout)
        name: Logger name

    Returns:
        Configured logger instance
    """
    level = getattr(logging, config.level.upper())

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    if config.path:
        config.path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(threadName)s] %(levelname)s %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setFormatter(coloredlogs.ColoredFormatter(
            fmt='%(asctime)s %(levelname)s %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    logging.getLogger(SCHEDULER_LOGGER_NAME).setLevel(max(level, logging.WARNING))

    return logger
