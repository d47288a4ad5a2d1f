import logging
import os
from typing import Optional

from config.logging_config import apply_logging_config, get_logging_config


def setup_logging(level: Optional[str] = None) -> None:
    """Initialize logging for the menu layout backend.

    - Applies the environment profile from config.logging_config once
    - An explicit level (or LOG_LEVEL) overrides the profile's default level
    """
    root = logging.getLogger()
    if not root.handlers:
        apply_logging_config(get_logging_config())
    level = level or os.getenv("LOG_LEVEL")
    if not level:
        return
    try:
        root.setLevel(getattr(logging, level.upper()))
    except AttributeError:
        root.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger after ensuring logging is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
