"""
================================================================================
Driver Factory
================================================================================

Builds Selenium WebDriver instances for a BrowserVariant.

Features:
    - Stability defaults per family (sandbox, GPU, notifications, popups)
    - Headless mode where the family supports it
    - Window geometry as a startup argument, or a resize for Safari
    - Implicit wait applied from configuration before the driver is returned

The factory is not registry-aware: SessionManager decides which thread owns
the driver it returns.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

from loguru import logger
from selenium import webdriver
from selenium.webdriver.common.options import ArgOptions
from selenium.webdriver.remote.webdriver import WebDriver

from ..common.config_loader import BrowserSettings
from ..exceptions import ConfigurationError, SessionCreationError
from .browser_variant import BrowserVariant


DEFAULT_WINDOW_WIDTH = 1920
DEFAULT_WINDOW_HEIGHT = 1080

CHROME_BASELINE_ARGS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-infobars",
    "--disable-notifications",
    "--disable-popup-blocking",
)

EDGE_BASELINE_ARGS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-notifications",
    "--disable-popup-blocking",
)

# Firefox takes these as profile preferences rather than switches
FIREFOX_BASELINE_PREFS: Dict[str, Any] = {
    "dom.webnotifications.enabled": False,
    "dom.push.enabled": False,
    "dom.disable_open_during_load": False,
    "layers.acceleration.disabled": True,
}

# Driver classes per base family; tests swap entries for doubles
DRIVER_CLASSES: Dict[BrowserVariant, Callable[..., WebDriver]] = {
    BrowserVariant.CHROME: webdriver.Chrome,
    BrowserVariant.FIREFOX: webdriver.Firefox,
    BrowserVariant.EDGE: webdriver.Edge,
    BrowserVariant.SAFARI: webdriver.Safari,
}


def _chrome_options(headless: bool, width: int, height: int, extra_args) -> ArgOptions:
    options = webdriver.ChromeOptions()
    for arg in CHROME_BASELINE_ARGS:
        options.add_argument(arg)
    if headless:
        options.add_argument("--headless=new")
    options.add_argument(f"--window-size={width},{height}")
    for arg in extra_args:
        options.add_argument(arg)
    return options


def _edge_options(headless: bool, width: int, height: int, extra_args) -> ArgOptions:
    options = webdriver.EdgeOptions()
    for arg in EDGE_BASELINE_ARGS:
        options.add_argument(arg)
    if headless:
        options.add_argument("--headless=new")
    options.add_argument(f"--window-size={width},{height}")
    for arg in extra_args:
        options.add_argument(arg)
    return options


def _firefox_options(headless: bool, width: int, height: int, extra_args) -> ArgOptions:
    options = webdriver.FirefoxOptions()
    for name, value in FIREFOX_BASELINE_PREFS.items():
        options.set_preference(name, value)
    if headless:
        options.add_argument("-headless")
    options.add_argument(f"--width={width}")
    options.add_argument(f"--height={height}")
    for arg in extra_args:
        options.add_argument(arg)
    return options


def _safari_options(headless: bool, width: int, height: int, extra_args) -> ArgOptions:
    # safaridriver accepts neither switches nor a startup geometry
    if extra_args:
        logger.debug(f"Safari ignores extra arguments: {list(extra_args)}")
    return webdriver.SafariOptions()


OPTION_BUILDERS: Dict[BrowserVariant, Callable[..., ArgOptions]] = {
    BrowserVariant.CHROME: _chrome_options,
    BrowserVariant.FIREFOX: _firefox_options,
    BrowserVariant.EDGE: _edge_options,
    BrowserVariant.SAFARI: _safari_options,
}

# Families whose geometry is applied with set_window_size after launch
RESIZE_AFTER_LAUNCH = frozenset({BrowserVariant.SAFARI})


class DriverFactory:
    """
    Creates configured WebDriver instances.

    Usage:
        >>> factory = DriverFactory()
        >>> driver = factory.build(BrowserVariant.FIREFOX, True, 1280, 720)
        >>> driver.quit()
    """

    def __init__(self, config: Any = None):
        """
        Initialize driver factory.

        Args:
            config: Object exposing ``get(key, default)``; the process-wide
                ConfigLoader is used when omitted
        """
        self._config = config

    def build(
        self,
        variant: Union[BrowserVariant, str],
        headless: bool = False,
        width: int = DEFAULT_WINDOW_WIDTH,
        height: int = DEFAULT_WINDOW_HEIGHT,
        *extra_args: str,
        settings: Optional[BrowserSettings] = None,
    ) -> WebDriver:
        """
        Build a WebDriver for the requested variant.

        Args:
            variant: BrowserVariant or its configuration name
            headless: Request headless mode (a headless variant implies it)
            width: Window width in pixels
            height: Window height in pixels
            *extra_args: Additional browser arguments, appended last
            settings: Configuration snapshot; read from config when omitted

        Returns:
            Configured WebDriver with the implicit wait applied

        Raises:
            SessionCreationError: If any construction step fails
        """
        driver: Optional[WebDriver] = None
        try:
            if not isinstance(variant, BrowserVariant):
                variant = BrowserVariant.parse(variant)

            if settings is None:
                settings = BrowserSettings.from_config(self._config)

            family = variant.base_family()
            headless = headless or variant.is_headless()

            if headless and not variant.supports_headless():
                if settings.headless_unsupported == "fail":
                    raise ConfigurationError(
                        f"{variant} does not support headless mode",
                        property_name="browser.headless",
                    )
                logger.warning(f"{variant} does not support headless mode; running headed")
                headless = False

            options = OPTION_BUILDERS[family](headless, width, height, extra_args)
            driver = DRIVER_CLASSES[family](options=options)

            if family in RESIZE_AFTER_LAUNCH:
                driver.set_window_size(width, height)

            driver.implicitly_wait(settings.implicit_timeout)

        except Exception as e:
            if driver is not None:
                _quit_quietly(driver)
            logger.error(f"Failed to create WebDriver for {variant}: {e}")
            raise SessionCreationError(variant, e) from e

        logger.debug(
            f"WebDriver created: {variant} "
            f"(headless={headless}, window={width}x{height})"
        )
        return driver


def _quit_quietly(driver: WebDriver) -> None:
    try:
        driver.quit()
    except Exception as e:
        logger.warning(f"Error while quitting half-built WebDriver: {e}")


__all__ = [
    "DriverFactory",
    "DRIVER_CLASSES",
    "OPTION_BUILDERS",
    "CHROME_BASELINE_ARGS",
    "EDGE_BASELINE_ARGS",
    "FIREFOX_BASELINE_PREFS",
    "DEFAULT_WINDOW_WIDTH",
    "DEFAULT_WINDOW_HEIGHT",
]
