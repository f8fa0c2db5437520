"""
================================================================================
UI Session Tools
================================================================================

Per-thread Selenium session management and polling waits for parallel UI
test suites.

Modules:
    - common: Configuration loading and logging setup
    - driver: Browser variants, driver construction, session registry
    - waits: Polling waiter and condition library
    - exceptions: Framework error taxonomy

Example:
    from selenium.webdriver.common.by import By
    from ui_session_tools import PollingWaiter, SessionManager

    manager = SessionManager()
    session = manager.get_or_create()
    try:
        session.handle.get("https://example.com")
        waiter = PollingWaiter(session)
        heading = waiter.wait_for("visible", (By.TAG_NAME, "h1"))
    finally:
        manager.terminate()

================================================================================
"""

__version__ = "1.0.0"

from .driver import BrowserVariant, DriverFactory, Session, SessionManager, SessionState
from .exceptions import (
    ConfigurationError,
    ElementNotFoundError,
    FrameworkError,
    SessionCreationError,
    UnsupportedVariantError,
    WaitCancelledError,
    WaitTimeoutError,
)
from .waits import CancellationToken, PollingWaiter

__all__ = [
    "BrowserVariant",
    "CancellationToken",
    "ConfigurationError",
    "DriverFactory",
    "ElementNotFoundError",
    "FrameworkError",
    "PollingWaiter",
    "Session",
    "SessionCreationError",
    "SessionManager",
    "SessionState",
    "UnsupportedVariantError",
    "WaitCancelledError",
    "WaitTimeoutError",
]
