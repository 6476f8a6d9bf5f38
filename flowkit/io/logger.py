"""Logging configuration for flowkit."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"flowkit.{name}")


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """Configure logging for flowkit.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to
    """
    logger = logging.getLogger("flowkit")
    logger.setLevel(getattr(logging, level.upper()))

    # Reconfiguring replaces earlier handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # stdout is reserved for command output
    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(getattr(logging, level.upper()))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    # Don't propagate to root logger
    logger.propagate = False
