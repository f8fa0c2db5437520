"""
================================================================================
Suite-wide Pytest Configuration
================================================================================

Marker registration and directory-based tagging for every suite under
testsuites/. Fixtures live next to the tests that use them.

================================================================================
"""

import os
from pathlib import Path

import pytest


MARKERS = {
    # Priority
    "P0": "Release blocking: session lifecycle and wait correctness",
    "P1": "Important behavior: errors, configuration, reporting",
    "P2": "Edge cases",
    "P3": "Exhaustive validation",
    # Type
    "smoke": "Fast sanity checks",
    "regression": "Full regression run",
    "unit": "Runs against fake drivers, no browser needed",
    "ui": "Drives a real browser (UI_LIVE_BROWSER=1)",
    # Feature
    "session": "Per-thread browser session lifecycle",
    "waits": "Polling waits and conditions",
}

# Directory name -> marker added to every test collected beneath it
DIRECTORY_MARKERS = {
    "unit": pytest.mark.unit,
    "ui_testing": pytest.mark.ui,
}


def pytest_configure(config):
    for name, description in MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")


def pytest_collection_modifyitems(config, items):
    """Tag tests by directory so `-m unit` and `-m ui` select whole suites."""
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        for directory, marker in DIRECTORY_MARKERS.items():
            if directory in parts:
                item.add_marker(marker)


def pytest_report_header(config):
    live = os.getenv("UI_LIVE_BROWSER", "").lower() in ("1", "true", "yes")
    return [
        "ui_session_tools test suites",
        f"live browser tests: {'enabled' if live else 'skipped (set UI_LIVE_BROWSER=1)'}",
    ]
