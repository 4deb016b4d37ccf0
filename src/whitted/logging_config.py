"""Logging configuration for the ray tracer.

Library modules only create loggers with ``logging.getLogger(__name__)``;
applications (the example scripts, for instance) call ``setup_logging`` once
to attach a console handler.
"""

import logging
import os
from typing import Optional

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def setup_logging(
    name: str = "src.whitted",
    level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up console logging for the ray tracer.

    Args:
        name: Logger name; the package logger covers every module
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = LOG_LEVEL

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT)

    # Replace any handler installed by an earlier call
    for handler in list(logger.handlers):
        if getattr(handler, "_whitted_console", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(formatter)
    console_handler._whitted_console = True
    logger.addHandler(console_handler)

    return logger
