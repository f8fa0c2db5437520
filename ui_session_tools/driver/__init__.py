"""
Browser session management: variants, driver construction and the
per-thread session registry.
"""

from .browser_variant import BrowserVariant, DEFAULT_VARIANT
from .driver_factory import DriverFactory
from .session_manager import Session, SessionManager, SessionState

__all__ = [
    "BrowserVariant",
    "DEFAULT_VARIANT",
    "DriverFactory",
    "Session",
    "SessionManager",
    "SessionState",
]
