"""Logging utilities."""

import logging

from cratematch.core.config import LoggingConfig


def setup_logging(config: LoggingConfig, level: str | None = None) -> None:
    """Setup application logging.

    Args:
        config: Logging configuration
        level: Overrides the configured level (e.g. "DEBUG" for --verbose)
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, (level or config.level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
