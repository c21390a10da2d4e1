"""
cssom_regression/config.py

Centralized environment variable configuration.
"""

import logging
import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


DEFAULT_PSEUDO_CLASSES: tuple[str, ...] = (
    "hover",
    "focus",
    "active",
    "focus-within",
    "focus-visible",
    "target",
)


def _parse_pseudo_classes(raw: str | None) -> list[str]:
    """Parse a comma-separated pseudo-class list, falling back to the defaults."""
    if not raw:
        return list(DEFAULT_PSEUDO_CLASSES)
    return [item.strip().lstrip(":") for item in raw.split(",") if item.strip()]


class Config():
    """
    Centralized configuration for environment variables.
    """

    # browser connection
    REMOTE_DEBUGGING_ADDRESS: str = os.getenv("CSSOM_REMOTE_DEBUGGING_ADDRESS", "http://127.0.0.1:9222")
    CDP_COMMAND_TIMEOUT: float = float(os.getenv("CSSOM_CDP_COMMAND_TIMEOUT", "10.0"))

    # capture
    PSEUDO_CLASSES: list[str] = _parse_pseudo_classes(os.getenv("CSSOM_PSEUDO_CLASSES"))

    # logging
    LOG_LEVEL: int = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    LOG_DATE_FORMAT: str = os.getenv("LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S")

    @classmethod
    def as_dict(cls) -> dict[str, Any]:
        """
        Return a dictionary of all UPPERCASE class attributes and their values.
        Return:
            dict[str, Any]: A dictionary of all UPPERCASE class attributes and their values.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if key.isupper()
        }
