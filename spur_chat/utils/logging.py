"""Logging setup shared by the API server and the scripts."""

import logging
import sys

from pydantic import BaseModel, Field

NOISY_LOGGERS = ("anthropic", "httpx", "httpcore", "sqlalchemy.engine", "asyncpg", "uvicorn.access")


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    package: str = "spur_chat"
    quiet_loggers: tuple[str, ...] = Field(default=NOISY_LOGGERS)


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root logger to write to stdout.

    The project package logger follows ``config.level``; module loggers from
    ``get_logger`` inherit it unless they were given their own level.

    Provider, HTTP and database driver loggers listed in
    ``config.quiet_loggers`` are held at WARNING so request logs stay readable
    even at DEBUG.
    """
    config = config or LogConfig()

    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger(config.package).setLevel(config.level.upper())

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)
        level: Explicit level; without one the logger inherits the level set by setup_logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(level.upper())
    return logger


def preview(text: str, limit: int = 50) -> str:
    """Shorten user or model text for log lines."""
    return text if len(text) <= limit else f"{text[:limit]}..."
