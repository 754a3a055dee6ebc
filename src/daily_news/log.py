"""Loguru sink configuration"""

import sys

from loguru import logger

from .config import settings


def setup_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with one using the configured format

    Args:
        level: Log level override, defaults to settings.log_level
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format=settings.log_format,
    )
