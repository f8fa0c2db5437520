"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (config/config.yaml by default)
    - Environment variable override (BROWSER_NAME overrides browser.name)
    - Dot notation path access with default values
    - BrowserSettings snapshot read once per session creation

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from ..exceptions import ConfigurationError


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"

HEADLESS_UNSUPPORTED_POLICIES = ("ignore", "fail")


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (BROWSER_NAME)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("browser.name", "chrome")
        'firefox'  # From YAML or env var

        >>> config.get("browser.timeout.explicit", 20)
        20  # Default value if not configured

    Environment Variable Mapping:
        - browser.name -> BROWSER_NAME
        - browser.window.width -> BROWSER_WINDOW_WIDTH
        - browser.timeout.explicit -> BROWSER_TIMEOUT_EXPLICIT
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton - configuration is loaded once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "browser.window.width")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None
        cls._config = {}


@dataclass(frozen=True)
class BrowserSettings:
    """
    Snapshot of the browser configuration taken at session-creation time.

    Attributes:
        browser_name: Free-text variant name, parsed by BrowserVariant.parse
        headless: Request headless operation
        window_width: Window width in pixels
        window_height: Window height in pixels
        implicit_timeout: Implicit wait applied to each new driver (seconds).
            Every failed lookup inside a PollingWaiter poll blocks this long,
            so a non-zero value stretches waits past their timeout
        explicit_timeout: Default PollingWaiter timeout (seconds)
        poll_interval: Default PollingWaiter poll interval (seconds)
        headless_unsupported: "ignore" or "fail" when headless is requested
            from a family that cannot run headless
    """
    browser_name: Optional[str] = "chrome"
    headless: bool = False
    window_width: int = 1920
    window_height: int = 1080
    implicit_timeout: float = 0.0
    explicit_timeout: float = 20
    poll_interval: float = 0.5
    headless_unsupported: str = "ignore"

    @classmethod
    def from_config(cls, config: Any = None) -> "BrowserSettings":
        """
        Read browser settings from a config object exposing ``get(key, default)``.

        Raises:
            ConfigurationError: If a value is malformed or out of range
        """
        config = config if config is not None else ConfigLoader()
        defaults = cls()

        policy = str(
            config.get("browser.headless_unsupported", defaults.headless_unsupported)
        ).strip().lower()
        if policy not in HEADLESS_UNSUPPORTED_POLICIES:
            raise ConfigurationError(
                f"unknown policy {policy!r}",
                property_name="browser.headless_unsupported",
                expected_format=" | ".join(HEADLESS_UNSUPPORTED_POLICIES),
            )

        headless = config.get("browser.headless", defaults.headless)
        if isinstance(headless, str):
            headless = headless.strip().lower() in ("true", "1", "yes", "on")

        return cls(
            browser_name=config.get("browser.name", defaults.browser_name),
            headless=bool(headless),
            window_width=_positive(
                config, "browser.window.width", defaults.window_width, int
            ),
            window_height=_positive(
                config, "browser.window.height", defaults.window_height, int
            ),
            implicit_timeout=_positive(
                config, "browser.timeout.implicit", defaults.implicit_timeout, float,
                allow_zero=True,
            ),
            explicit_timeout=_positive(
                config, "browser.timeout.explicit", defaults.explicit_timeout, float
            ),
            poll_interval=_positive(
                config, "browser.timeout.poll_interval", defaults.poll_interval, float
            ),
            headless_unsupported=policy,
        )


def _positive(config: Any, key: str, default: Any, kind: type, allow_zero: bool = False):
    raw = config.get(key, default)
    try:
        value = kind(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"invalid value {raw!r}",
            property_name=key,
            expected_format=f"{'non-negative' if allow_zero else 'positive'} {kind.__name__}",
        ) from e
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigurationError(
            f"value {raw!r} out of range",
            property_name=key,
            expected_format=f"{'non-negative' if allow_zero else 'positive'} {kind.__name__}",
        )
    return value


__all__ = [
    "ConfigLoader",
    "BrowserSettings",
    "DEFAULT_CONFIG_PATH",
]
