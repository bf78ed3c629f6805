"""Logging setup."""
import sys

from loguru import logger


def setup_logging(level: str = "WARNING") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
