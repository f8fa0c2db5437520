"""
In-memory WebDriver doubles for unit tests.

FakeDriver answers the subset of the WebDriver API the session manager and
the waits use. Elements are registered per (By, value) locator; a callable
entry is invoked on every lookup so tests can script changing pages.
"""

from __future__ import annotations

import itertools
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Union

from selenium.common.exceptions import NoSuchElementException, WebDriverException


class FakeElement:
    def __init__(
        self,
        displayed: bool = True,
        enabled: bool = True,
        selected: bool = False,
        text: str = "",
        attributes: Optional[Dict[str, str]] = None,
    ):
        self.displayed = displayed
        self.enabled = enabled
        self.selected = selected
        self.text = text
        self.attributes = attributes or {}

    def is_displayed(self) -> bool:
        return self.displayed

    def is_enabled(self) -> bool:
        return self.enabled

    def is_selected(self) -> bool:
        return self.selected

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)


Entry = Union[FakeElement, List[FakeElement], Callable[[], Any]]

_ids = itertools.count(1)


class FakeDriver:
    def __init__(
        self,
        elements: Optional[Dict[tuple, Entry]] = None,
        title: str = "",
        current_url: str = "about:blank",
        options: Any = None,
        quit_error: Optional[Exception] = None,
    ):
        self.id = next(_ids)
        self.elements: Dict[tuple, Entry] = dict(elements or {})
        self.title = title
        self.current_url = current_url
        self.options = options
        self.quit_error = quit_error
        self.quit_calls = 0
        self.window_size = None
        self.implicit_wait = None
        self.created_in = threading.get_ident()

    def _resolve(self, by: str, value: str) -> List[FakeElement]:
        entry = self.elements.get((by, value))
        if callable(entry):
            entry = entry()
        if entry is None:
            return []
        if isinstance(entry, list):
            return entry
        return [entry]

    def find_element(self, by: str, value: str) -> FakeElement:
        found = self._resolve(by, value)
        if not found:
            raise NoSuchElementException(f"no such element: {by}={value}")
        return found[0]

    def find_elements(self, by: str, value: str) -> List[FakeElement]:
        return self._resolve(by, value)

    def set_window_size(self, width: int, height: int) -> None:
        self.window_size = (width, height)

    def implicitly_wait(self, seconds: float) -> None:
        self.implicit_wait = seconds

    def quit(self) -> None:
        self.quit_calls += 1
        if self.quit_error is not None:
            raise self.quit_error


class RecordingDriver(FakeDriver):
    """Stands in for webdriver.Chrome & co.; keeps the options it was built with."""

    instances: List["RecordingDriver"] = []

    def __init__(self, options: Any = None):
        super().__init__(options=options)
        RecordingDriver.instances.append(self)


class ImplicitWaitDriver(RecordingDriver):
    """Blocks for the implicit wait on lookups that match nothing, like WebDriver."""

    def _resolve(self, by: str, value: str) -> List[FakeElement]:
        found = super()._resolve(by, value)
        if not found and self.implicit_wait:
            time.sleep(self.implicit_wait)
        return found


class BrokenImplicitWaitDriver(RecordingDriver):
    def implicitly_wait(self, seconds: float) -> None:
        raise WebDriverException("session not created")


class FakeFactory:
    """DriverFactory double: builds FakeDrivers and records each request."""

    def __init__(self, elements: Optional[Dict[tuple, Entry]] = None, error: Optional[Exception] = None):
        self.elements = elements or {}
        self.error = error
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def build(self, variant, headless=False, width=1920, height=1080, *extra_args, settings=None):
        with self._lock:
            self.calls.append((variant, headless, width, height, extra_args))
        if self.error is not None:
            raise self.error
        return FakeDriver(elements=self.elements)


class DummyConfig:
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = data or {}

    def get(self, key, default=None):
        return self.data.get(key, default)
