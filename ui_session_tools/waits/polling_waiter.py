"""
================================================================================
Polling Waiter
================================================================================

Bounded, fixed-interval waits against a browser session.

Every wait follows the same loop:

    1. evaluate the condition immediately
    2. stop if it holds, or if monotonic elapsed time >= timeout
    3. sleep poll_interval (never past the deadline) and go to 1

Transient lookup failures (NoSuchElementException,
StaleElementReferenceException) count as "not yet". Any other exception
propagates at once.

Precondition waits (wait_for, wait_for_custom) raise on timeout; assertion
waits (wait_for_disappearance, wait_for_text_presence, ...) return False.

Usage:
    waiter = PollingWaiter(session)
    button = waiter.wait_for("clickable", (By.ID, "submit"))
    assert waiter.wait_for_url_contains("/dashboard", timeout=5)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Tuple, TypeVar

import allure
from loguru import logger
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC

from ..common.config_loader import BrowserSettings
from ..exceptions import ElementNotFoundError, WaitCancelledError, WaitTimeoutError
from .conditions import (
    Found,
    Locator,
    NAMED_CONDITIONS,
    TRANSIENT_EXCEPTIONS,
    evaluate,
)


T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 0.5


class CancellationToken:
    """
    Cross-thread cancel signal for waits.

    Cancelling wakes a waiter that is sleeping between polls.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def sleep(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; True if cancelled meanwhile."""
        return self._event.wait(seconds)


@dataclass(frozen=True)
class WaitSpec:
    """
    Parameters of one polling wait.

    Attributes:
        timeout: Total time budget in seconds
        poll_interval: Sleep between evaluations in seconds
        ignored_exceptions: Exception types treated as "not yet"
    """
    timeout: float
    poll_interval: float = DEFAULT_POLL_INTERVAL
    ignored_exceptions: Tuple[type, ...] = field(default=TRANSIENT_EXCEPTIONS)

    def with_timeout(self, timeout: float) -> "WaitSpec":
        return replace(self, timeout=timeout)

    def polling_every(self, poll_interval: float) -> "WaitSpec":
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {poll_interval}")
        return replace(self, poll_interval=poll_interval)

    def ignoring(self, *exceptions: type) -> "WaitSpec":
        merged = self.ignored_exceptions + tuple(
            e for e in exceptions if e not in self.ignored_exceptions
        )
        return replace(self, ignored_exceptions=merged)


def poll_until(
    predicate: Callable[[Any], Any],
    driver: Any,
    spec: WaitSpec,
    description: str = "condition",
    cancel_token: Optional[CancellationToken] = None,
) -> Any:
    """
    Evaluate ``predicate(driver)`` until it succeeds or ``spec.timeout`` elapses.

    Returns:
        The predicate's satisfying value

    Raises:
        WaitTimeoutError: If the condition is not met in time
        WaitCancelledError: If ``cancel_token`` is cancelled
        Exception: Whatever the predicate raises outside ``ignored_exceptions``
    """
    start = time.monotonic()
    attempt = 0

    while True:
        if cancel_token is not None and cancel_token.cancelled:
            raise WaitCancelledError(f"Wait cancelled: {description}")

        attempt += 1
        outcome = evaluate(predicate, driver, spec.ignored_exceptions)
        elapsed = time.monotonic() - start

        if isinstance(outcome, Found):
            logger.debug(
                f"Wait successful after {attempt} attempts ({elapsed:.2f}s): {description}"
            )
            return outcome.value

        if elapsed >= spec.timeout:
            reason = f" Last result: {outcome.reason}" if outcome.reason else ""
            raise WaitTimeoutError(
                f"Timeout after {elapsed:.1f}s waiting for: {description}.{reason}",
                timeout=spec.timeout,
            )

        delay = min(spec.poll_interval, spec.timeout - elapsed)
        if cancel_token is not None:
            if cancel_token.sleep(delay):
                raise WaitCancelledError(f"Wait cancelled: {description}")
        else:
            time.sleep(delay)


class FluentWait:
    """
    Wait with per-call tuning of timeout, interval and ignored exceptions.

    Usage:
        value = (
            waiter.fluent(timeout=5, poll_interval=0.1)
            .ignoring(ElementNotInteractableException)
            .until(lambda d: d.find_element(By.ID, "total").text)
        )
    """

    def __init__(
        self,
        driver: Any,
        spec: WaitSpec,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self._driver = driver
        self.spec = spec
        self._cancel_token = cancel_token

    def ignoring(self, *exceptions: type) -> "FluentWait":
        self.spec = self.spec.ignoring(*exceptions)
        return self

    def until(self, predicate: Callable[[Any], T], message: str = "") -> T:
        description = message or repr(predicate)
        return poll_until(
            predicate, self._driver, self.spec, description, self._cancel_token
        )


class PollingWaiter:
    """
    Waits bound to one browser session.

    Args:
        session: A Session (its ``handle`` is used) or a WebDriver
        timeout: Default timeout in seconds; ``browser.timeout.explicit``
            from configuration when omitted
        poll_interval: Seconds between evaluations;
            ``browser.timeout.poll_interval`` when omitted
        config: Object exposing ``get(key, default)`` for the defaults
        cancel_token: Optional token that aborts any running wait
    """

    def __init__(
        self,
        session: Any,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        config: Any = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.driver = getattr(session, "handle", session)

        if timeout is None or poll_interval is None:
            settings = BrowserSettings.from_config(config)
            timeout = settings.explicit_timeout if timeout is None else timeout
            poll_interval = settings.poll_interval if poll_interval is None else poll_interval

        self.timeout = timeout
        self.poll_interval = poll_interval
        self.cancel_token = cancel_token

    def _spec(self, timeout: Optional[float]) -> WaitSpec:
        return WaitSpec(
            timeout=self.timeout if timeout is None else timeout,
            poll_interval=self.poll_interval,
        )

    def _poll(self, predicate, timeout: Optional[float], description: str) -> Any:
        return poll_until(
            predicate, self.driver, self._spec(timeout), description, self.cancel_token
        )

    def _check(self, predicate, timeout: Optional[float], description: str) -> bool:
        with allure.step(f"Wait for {description}"):
            try:
                self._poll(predicate, timeout, description)
                return True
            except WaitTimeoutError as e:
                logger.debug(str(e))
                return False

    # =========================================================================
    # Precondition Waits
    # =========================================================================

    def wait_for(
        self,
        condition: str,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> WebElement:
        """
        Wait until the located element is ``visible``, ``clickable`` or ``present``.

        Returns:
            The element

        Raises:
            ElementNotFoundError: If the condition does not hold in time
            ValueError: If ``condition`` is not a built-in condition name
        """
        try:
            build_condition = NAMED_CONDITIONS[condition]
        except KeyError:
            raise ValueError(
                f"Unknown condition {condition!r}; "
                f"expected one of {', '.join(NAMED_CONDITIONS)}"
            ) from None

        spec = self._spec(timeout)
        with allure.step(f"Wait for element {condition}: {locator}"):
            try:
                return poll_until(
                    build_condition(locator),
                    self.driver,
                    spec,
                    f"element {condition}: {locator}",
                    self.cancel_token,
                )
            except WaitTimeoutError as e:
                logger.error(f"Element not {condition} within {spec.timeout:g}s: {locator}")
                raise ElementNotFoundError(locator, spec.timeout, condition) from e

    def wait_for_custom(
        self,
        predicate: Callable[[Any], T],
        timeout: Optional[float] = None,
        message: str = "",
    ) -> T:
        """
        Poll ``predicate(driver)`` until it yields a result.

        Raises:
            WaitTimeoutError: If no result arrives in time
        """
        description = message or repr(predicate)
        with allure.step(f"Wait for {description}"):
            return self._poll(predicate, timeout, description)

    def fluent(
        self,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> FluentWait:
        """Create a FluentWait seeded with this waiter's defaults."""
        spec = self._spec(timeout)
        if poll_interval is not None:
            spec = spec.polling_every(poll_interval)
        return FluentWait(self.driver, spec, self.cancel_token)

    # =========================================================================
    # Assertion Waits
    # =========================================================================

    def wait_for_disappearance(self, locator: Locator, timeout: Optional[float] = None) -> bool:
        """True once the element is absent or hidden, False on timeout."""
        return self._check(
            EC.invisibility_of_element_located(locator),
            timeout,
            f"element to disappear: {locator}",
        )

    def wait_for_text_presence(
        self,
        locator: Locator,
        text: str,
        timeout: Optional[float] = None,
    ) -> bool:
        return self._check(
            EC.text_to_be_present_in_element(locator, text),
            timeout,
            f"text '{text}' in element: {locator}",
        )

    def wait_for_attribute_contains(
        self,
        locator: Locator,
        attribute: str,
        value: str,
        timeout: Optional[float] = None,
    ) -> bool:
        return self._check(
            EC.text_to_be_present_in_element_attribute(locator, attribute, value),
            timeout,
            f"attribute '{attribute}' to contain '{value}': {locator}",
        )

    def wait_for_title_contains(self, text: str, timeout: Optional[float] = None) -> bool:
        return self._check(EC.title_contains(text), timeout, f"title to contain '{text}'")

    def wait_for_url_contains(self, fragment: str, timeout: Optional[float] = None) -> bool:
        return self._check(EC.url_contains(fragment), timeout, f"URL to contain '{fragment}'")

    # =========================================================================
    # Immediate Checks
    # =========================================================================

    def is_element_displayed(self, locator: Locator) -> bool:
        try:
            return self.driver.find_element(*locator).is_displayed()
        except TRANSIENT_EXCEPTIONS:
            return False

    def is_element_enabled(self, locator: Locator) -> bool:
        try:
            return self.driver.find_element(*locator).is_enabled()
        except TRANSIENT_EXCEPTIONS:
            return False

    def is_element_selected(self, locator: Locator) -> bool:
        try:
            return self.driver.find_element(*locator).is_selected()
        except TRANSIENT_EXCEPTIONS:
            return False

    def element_count(self, locator: Locator) -> int:
        return len(self.driver.find_elements(*locator))


__all__ = [
    "PollingWaiter",
    "FluentWait",
    "WaitSpec",
    "CancellationToken",
    "poll_until",
    "DEFAULT_POLL_INTERVAL",
]
