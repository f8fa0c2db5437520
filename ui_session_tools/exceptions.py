"""
================================================================================
Framework Exceptions
================================================================================

Error taxonomy for session management and polling waits.

Every error carries an ``error_code`` so reports and log searches can group
failures without parsing messages:

    FrameworkError
        ConfigurationError          CONFIGURATION_ERROR
            UnsupportedVariantError CONFIGURATION_ERROR
        SessionCreationError        SESSION_CREATION_ERROR
        ElementNotFoundError        ELEMENT_NOT_FOUND
        WaitTimeoutError            WAIT_TIMEOUT
        WaitCancelledError          WAIT_CANCELLED

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Optional


class FrameworkError(Exception):
    """Base class for all framework errors."""

    default_code = "FRAMEWORK_ERROR"

    def __init__(self, message: str = "", error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code

    def __str__(self) -> str:
        return f"{type(self).__name__} [{self.error_code}]: {self.message}"


class ConfigurationError(FrameworkError):
    """Raised when configuration loading or access fails."""

    default_code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        property_name: Optional[str] = None,
        expected_format: Optional[str] = None,
    ):
        if property_name:
            message = f"Configuration error for property '{property_name}': {message}"
        if expected_format:
            message = f"{message}. Expected format: {expected_format}"
        super().__init__(message)
        self.property_name = property_name
        self.expected_format = expected_format


class UnsupportedVariantError(ConfigurationError, ValueError):
    """Raised when a browser name does not match any known variant."""

    def __init__(self, name: str, supported: Iterable[str]):
        self.name = name
        self.supported = list(supported)
        super().__init__(
            f"Unsupported browser: {name!r}. "
            f"Supported browsers: {', '.join(self.supported)}"
        )


class SessionCreationError(FrameworkError):
    """Raised when a browser session cannot be constructed or configured."""

    default_code = "SESSION_CREATION_ERROR"

    def __init__(self, variant: Any, cause: Optional[BaseException] = None):
        self.variant = variant
        self.cause = cause
        message = f"Failed to create WebDriver for browser: {variant}"
        if cause is not None:
            message = f"{message} ({type(cause).__name__}: {cause})"
        super().__init__(message)


class ElementNotFoundError(FrameworkError):
    """Raised when a located element never reaches the awaited condition."""

    default_code = "ELEMENT_NOT_FOUND"

    def __init__(self, locator: Any, timeout: float, condition: str):
        self.locator = locator
        self.timeout = timeout
        self.condition = condition
        super().__init__(
            f"Element not {condition} within {timeout:g} seconds: {locator}"
        )


class WaitTimeoutError(FrameworkError):
    """Raised when a wait operation times out."""

    default_code = "WAIT_TIMEOUT"

    def __init__(self, message: str, timeout: float = 0.0):
        super().__init__(message)
        self.timeout = timeout


class WaitCancelledError(FrameworkError):
    """Raised when a wait is cancelled through its cancellation token."""

    default_code = "WAIT_CANCELLED"


__all__ = [
    "FrameworkError",
    "ConfigurationError",
    "UnsupportedVariantError",
    "SessionCreationError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "WaitCancelledError",
]
