import os
import sys
from typing import Optional

from loguru import logger

from offlinemode.core.constants import LOG_FILE

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = "INFO", log_file: Optional[str] = LOG_FILE):
    """
    Configure loguru sinks for an application run.

    Library code only logs; sinks are installed by whoever owns the process
    (the CLI or the embedding application).

    Args:
        level: Minimum level for the console sink
        log_file: Rotating file sink path, or None to disable file logging
    """
    logger.remove()  # Remove default handler

    # Add stderr handler only if available (not in windowed exe)
    if sys.stderr:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper())

    if log_file:
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        logger.add(
            log_file,
            rotation="1 MB",
            retention="10 days",
            format=FILE_FORMAT,
            level="DEBUG",
        )
