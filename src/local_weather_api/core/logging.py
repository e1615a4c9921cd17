"""Loguru configuration shared by the server and the session services."""

import sys

from loguru import logger

from .config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> | {extra}"
)


def setup_logging(level: str | None = None) -> None:
    """Configure loguru for structured logging.

    Removes the default handler and writes human-readable records to stderr.
    Structured context passed as keyword arguments ends up in ``{extra}``.

    Args:
        level: Log level override; defaults to ``settings.LOG_LEVEL``
    """
    level = level or settings.LOG_LEVEL

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=level,
        serialize=False,  # Human-readable format
        colorize=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT == "development",
    )

    logger.info("Logging configured", level=level)
