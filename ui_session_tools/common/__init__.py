"""
================================================================================
UI Session Tools Common Utilities
================================================================================

Shared configuration management and logging setup.

Exports:
    - ConfigLoader: Singleton YAML + environment configuration loader
    - BrowserSettings: Browser configuration snapshot
    - get_config: Convenience function to get configuration values
    - init_logger: Initialize the loguru logger with standard settings

Usage:
    from ui_session_tools.common import get_config, init_logger

    init_logger()
    browser = get_config("browser.name", "chrome")

================================================================================
"""

import os
import sys
from typing import Any

from loguru import logger

from .config_loader import BrowserSettings, ConfigLoader, DEFAULT_CONFIG_PATH


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get a configuration value.

    Args:
        key: Configuration key using dot notation
        default: Default value if not found

    Example:
        width = get_config("browser.window.width", 1920)
    """
    return ConfigLoader().get(key, default)


# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False

DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{thread.name}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def init_logger(
    level: str = None,
    format_string: str = None,
    log_file: str = None
) -> None:
    """
    Initializes the loguru logger with standard settings.

    The default format includes the thread name, since sessions are owned
    per thread and parallel runs interleave their output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    logger.remove()

    level = (level or get_config("logging.level", "INFO")).upper()
    format_string = format_string or get_config("logging.format", DEFAULT_LOG_FORMAT)

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or get_config("logging.file")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
            enqueue=True,
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


__all__ = [
    "ConfigLoader",
    "BrowserSettings",
    "DEFAULT_CONFIG_PATH",
    "get_config",
    "init_logger",
]
