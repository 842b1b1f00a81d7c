"""
Logging Configuration
loguru sinks for the API, with the standard logging module routed into them
"""

import logging
import sys
from typing import Any

from loguru import logger as loguru_logger

from vetclinic.core.config import settings

DEBUG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Server loggers that install their own handlers
SERVER_LOGGERS = ("uvicorn", "uvicorn.access", "fastapi")

# Statement logging only when debugging queries
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "passlib")


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru, keeping the caller's frame"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging() -> None:
    """Colored console output under DEBUG, JSON lines otherwise, plus the optional LOG_FILE"""
    loguru_logger.remove()
    loguru_logger.configure(extra={"name": "vetclinic"})

    if settings.DEBUG:
        loguru_logger.add(sys.stdout, format=DEBUG_FORMAT, level="DEBUG", colorize=True)
    else:
        loguru_logger.add(sys.stdout, level=settings.LOG_LEVEL, serialize=True)

    if settings.LOG_FILE:
        loguru_logger.add(
            settings.LOG_FILE,
            rotation="100 MB",
            retention="7 days",
            compression="zip",
            level=settings.LOG_LEVEL,
            serialize=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in SERVER_LOGGERS:
        logging.getLogger(name).handlers = [InterceptHandler()]
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Logger whose records carry the module name in extra["name"]"""
    return loguru_logger.bind(name=name)
