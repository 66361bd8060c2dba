"""Logging configuration for the referral writer."""

import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(f"referral_writer.{name}")


def configure_logging(level: str = None) -> None:
    """Configure root logging for the CLI.

    Args:
        level: Log level name (default: LOG_LEVEL env variable or WARNING)
    """
    level_name = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
