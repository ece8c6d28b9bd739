"""
Logging configuration and utilities.

This module provides:
- Centralized logger creation
- Consistent log formatting across modules
- Optional level override from the environment
"""

from __future__ import annotations

import logging
import os




# ==== LOGGER FACTORY ==== #

def get_logger(name: str) -> logging.Logger:
    """
    Get or create logger with standardized formatting.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logging.Logger instance

    Format:
        YYYY-MM-DD HH:MM:SS,mmm LEVEL module.name message

    Example:
        logger = get_logger(__name__)
        logger.info("fetch_started")
        # Output: 2025-11-15 10:30:45,123 INFO html_xpath.pipelines.loader fetch_started

    Note:
        Logger is configured only on first call for each name.
        The level comes from HTML_XPATH_LOG_LEVEL (default WARNING).
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        level_name = os.getenv("HTML_XPATH_LOG_LEVEL", "WARNING").upper()
        logger.setLevel(getattr(logging, level_name, logging.WARNING))

    return logger
