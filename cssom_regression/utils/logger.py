"""
cssom_regression/utils/logger.py

Logger factory shared by every module in the package.
"""

import logging

from cssom_regression.config import Config

_PACKAGE_LOGGER_NAME = "cssom_regression"
_configured = False


def _configure_package_logger() -> None:
    """Attach a single stream handler to the package logger."""
    global _configured
    if _configured:
        return

    package_logger = logging.getLogger(_PACKAGE_LOGGER_NAME)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=Config.LOG_FORMAT, datefmt=Config.LOG_DATE_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(Config.LOG_LEVEL)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger configured with the package defaults.
    Args:
        name: Logger name, usually `__name__` of the calling module.
    Returns:
        The configured logger.
    """
    _configure_package_logger()
    return logging.getLogger(name)
