"""
================================================================================
Browser Variants
================================================================================

Closed set of browser families (and their headless forms) a session can be
built for. Parsing accepts the configuration spelling, case-insensitively:

    chrome, firefox, edge, safari,
    chrome-headless, firefox-headless, edge-headless

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..exceptions import UnsupportedVariantError


class BrowserVariant(Enum):
    """Browser family plus headless flag."""

    CHROME = ("chrome", "Chrome")
    FIREFOX = ("firefox", "Firefox")
    EDGE = ("edge", "Microsoft Edge")
    SAFARI = ("safari", "Safari")
    CHROME_HEADLESS = ("chrome-headless", "Chrome Headless")
    FIREFOX_HEADLESS = ("firefox-headless", "Firefox Headless")
    EDGE_HEADLESS = ("edge-headless", "Microsoft Edge Headless")

    def __init__(self, browser_name: str, display_name: str):
        self.browser_name = browser_name
        self.display_name = display_name

    def __str__(self) -> str:
        return self.display_name

    def is_headless(self) -> bool:
        return self in _HEADLESS_TO_BASE

    def base_family(self) -> "BrowserVariant":
        """Map a headless variant back to its family; other variants map to themselves."""
        return _HEADLESS_TO_BASE.get(self, self)

    def supports_headless(self) -> bool:
        return self.base_family() in _BASE_TO_HEADLESS

    def headless_variant(self) -> "BrowserVariant":
        """
        Headless form of this variant.

        Families without headless support return themselves; the factory
        decides what a headless request means for them.
        """
        return _BASE_TO_HEADLESS.get(self.base_family(), self)

    @classmethod
    def parse(cls, name: Optional[str]) -> "BrowserVariant":
        """
        Parse a variant from its configuration name.

        Blank or missing input yields CHROME.

        Raises:
            UnsupportedVariantError: If the name matches no variant
        """
        if name is None or not str(name).strip():
            return DEFAULT_VARIANT

        normalized = str(name).strip().lower()
        for variant in cls:
            if variant.browser_name == normalized:
                return variant

        raise UnsupportedVariantError(name, supported_names())


_HEADLESS_TO_BASE = {
    BrowserVariant.CHROME_HEADLESS: BrowserVariant.CHROME,
    BrowserVariant.FIREFOX_HEADLESS: BrowserVariant.FIREFOX,
    BrowserVariant.EDGE_HEADLESS: BrowserVariant.EDGE,
}
_BASE_TO_HEADLESS = {base: headless for headless, base in _HEADLESS_TO_BASE.items()}

DEFAULT_VARIANT = BrowserVariant.CHROME


def supported_names() -> list[str]:
    return [variant.browser_name for variant in BrowserVariant]


__all__ = [
    "BrowserVariant",
    "DEFAULT_VARIANT",
    "supported_names",
]
