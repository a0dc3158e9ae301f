"""
Logging configuration for the intervention optimizer.
"""

import logging
import os
import sys
from pathlib import Path


PROJECT_LOGGER = "intervention_optimizer"

# Modules log through logging.getLogger(__name__), so the package roots
# are configured alongside the project logger.
PACKAGE_LOGGERS = ("src", "api")


def setup_logging(
    level: str = None,
    log_file: str = None,
) -> logging.Logger:
    """
    Set up logging for the optimizer and its HTTP surface.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var or INFO.
        log_file: Optional file path to write logs to.

    Returns:
        The configured project logger
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    level_num = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level_num)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level_num)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in (PROJECT_LOGGER, *PACKAGE_LOGGERS):
        named = logging.getLogger(name)
        named.setLevel(level_num)
        # Replace handlers so repeated setup does not duplicate output
        named.handlers = list(handlers)

    return logging.getLogger(PROJECT_LOGGER)


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional name suffix for the logger

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"{PROJECT_LOGGER}.{name}")
    return logging.getLogger(PROJECT_LOGGER)
