"""
================================================================================
Wait Conditions
================================================================================

Predicates for PollingWaiter.wait_for_custom().

A predicate takes a WebDriver and answers in one of three ways:

    - a truthy value, or Found(value)   -> condition met, value returned
    - a falsy value, or NotYetReady     -> poll again
    - an exception                      -> retried if transient, else raised

The builders below are session-independent and turn transient lookup
failures (element not yet rendered, stale reference) into NotYetReady.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Tuple, TypeVar, Union

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
)
from selenium.webdriver.support import expected_conditions as EC


T = TypeVar("T")

Locator = Tuple[str, str]

TRANSIENT_EXCEPTIONS: Tuple[type, ...] = (
    NoSuchElementException,
    StaleElementReferenceException,
)


# =============================================================================
# Poll Outcomes
# =============================================================================

@dataclass(frozen=True)
class Found(Generic[T]):
    """Condition met; ``value`` is handed back to the caller."""
    value: T


@dataclass(frozen=True)
class NotYetReady:
    """Condition not met yet; ``reason`` ends up in timeout messages."""
    reason: str = ""


Outcome = Union[Found, NotYetReady]


def evaluate(
    predicate: Callable[[Any], Any],
    driver: Any,
    ignored: Tuple[type, ...] = TRANSIENT_EXCEPTIONS,
) -> Outcome:
    """
    Run a predicate once and classify the result.

    Exceptions listed in ``ignored`` become NotYetReady; any other
    exception propagates.
    """
    try:
        result = predicate(driver)
    except ignored as e:
        return NotYetReady(f"{type(e).__name__}: {_first_line(e)}")

    if isinstance(result, (Found, NotYetReady)):
        return result
    if result:
        return Found(result)
    return NotYetReady()


def _first_line(error: BaseException) -> str:
    text = getattr(error, "msg", None) or str(error)
    return text.strip().splitlines()[0] if text.strip() else ""


# =============================================================================
# Condition Library
# =============================================================================

class Condition:
    """A named predicate; the name shows up in logs and timeout errors."""

    def __init__(self, fn: Callable[[Any], Any], description: str):
        self._fn = fn
        self.description = description

    def __call__(self, driver: Any) -> Any:
        return self._fn(driver)

    def __repr__(self) -> str:
        return self.description


def element_enabled(locator: Locator) -> Condition:
    """Element located by ``locator`` exists and is enabled."""
    def _predicate(driver):
        try:
            return driver.find_element(*locator).is_enabled()
        except TRANSIENT_EXCEPTIONS:
            return NotYetReady(f"{locator} not attached")

    return Condition(_predicate, f"element to be enabled: {locator}")


def element_selected(locator: Locator) -> Condition:
    """Element located by ``locator`` exists and is selected."""
    def _predicate(driver):
        try:
            return driver.find_element(*locator).is_selected()
        except TRANSIENT_EXCEPTIONS:
            return NotYetReady(f"{locator} not attached")

    return Condition(_predicate, f"element to be selected: {locator}")


def element_count_equals(locator: Locator, expected_count: int) -> Condition:
    """
    Exactly ``expected_count`` elements match ``locator``.

    Yields the matching elements, an empty list when ``expected_count`` is 0.
    """
    if expected_count < 0:
        raise ValueError(f"expected_count must be >= 0, got {expected_count}")

    def _predicate(driver):
        try:
            elements = driver.find_elements(*locator)
        except TRANSIENT_EXCEPTIONS:
            return NotYetReady(f"{locator} lookup failed")
        if len(elements) == expected_count:
            return Found(elements)
        return NotYetReady(f"found {len(elements)} elements")

    return Condition(
        _predicate, f"number of elements to be {expected_count}: {locator}"
    )


def text_matches_pattern(locator: Locator, pattern: Union[str, "re.Pattern[str]"]) -> Condition:
    """Full text of the element matches the regular expression ``pattern``."""
    compiled = re.compile(pattern)

    def _predicate(driver):
        try:
            text = driver.find_element(*locator).text
        except TRANSIENT_EXCEPTIONS:
            return NotYetReady(f"{locator} not attached")
        return text is not None and compiled.fullmatch(text) is not None

    return Condition(
        _predicate, f"element text to match pattern '{compiled.pattern}': {locator}"
    )


# Built-in conditions for PollingWaiter.wait_for(); each yields the element
NAMED_CONDITIONS: Dict[str, Callable[[Locator], Callable[[Any], Any]]] = {
    "visible": EC.visibility_of_element_located,
    "clickable": EC.element_to_be_clickable,
    "present": EC.presence_of_element_located,
}


__all__ = [
    "Found",
    "NotYetReady",
    "Outcome",
    "Condition",
    "Locator",
    "TRANSIENT_EXCEPTIONS",
    "NAMED_CONDITIONS",
    "evaluate",
    "element_enabled",
    "element_selected",
    "element_count_equals",
    "text_matches_pattern",
]
