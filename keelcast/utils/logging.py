"""Logging configuration using loguru."""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

from keelcast.models.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"

# aiohttp reports connection problems through the standard library
LIBRARY_LOGGERS = ("aiohttp.client", "aiohttp.internal")


class StdlibBridge(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure loguru sinks from configuration.

    Console output goes to stderr. A rotating file sink is added only when
    ``config.file_path`` is set. Warnings from aiohttp's standard library
    loggers end up in the same sinks.

    Args:
        config: Logging configuration
    """
    handlers: list[dict[str, Any]] = [
        {
            "sink": sys.stderr,
            "level": config.level,
            "format": CONSOLE_FORMAT,
            "colorize": config.colorize,
        }
    ]

    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            {
                "sink": config.file_path,
                "level": config.level,
                "format": FILE_FORMAT,
                "rotation": config.rotation,
                "retention": config.retention,
                "compression": config.compression,
                "serialize": config.serialize,
                "enqueue": True,
            }
        )

    logger.configure(handlers=handlers)

    bridge = StdlibBridge()
    for name in LIBRARY_LOGGERS:
        library_logger = logging.getLogger(name)
        library_logger.handlers = [bridge]
        library_logger.setLevel(logging.WARNING)
        library_logger.propagate = False

    logger.debug(
        "Logging configured",
        level=config.level,
        file=config.file_path,
        serialize=config.serialize,
    )


def get_logger(name: str) -> "Logger":
    """Return the shared logger bound to a module name."""
    return logger.bind(name=name)
