"""
Logging configuration using loguru.
"""

from pathlib import Path
from typing import Optional
from loguru import logger
import sys


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logger:
    """
    Setup application logging.

    Args:
        verbose: Enable verbose logging (OS commands and their output)
        log_file: Optional file that receives the full debug log

    Returns:
        Configured logger instance
    """
    # Remove default handler
    logger.remove()

    # Console handler; stdout is reserved for command results
    log_level = "DEBUG" if verbose else "WARNING"
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="30 days",
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
        )
        logger.debug(f"Log file: {log_file}")

    logger.debug("Logging initialized")

    return logger
