"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for tests that drive a real browser through SessionManager.

Key Features:
- One SessionManager per run, one session per worker thread
- Session teardown after every test
- Screenshot capture on failure, attached to Allure

Live tests need a local browser and are skipped unless UI_LIVE_BROWSER=1.
Browser, headless flag and geometry come from config/config.yaml or the
BROWSER_* environment variables (see run_tests.py).

================================================================================
"""

import os
from typing import Generator

import allure
import pytest
from loguru import logger

from ui_session_tools.driver.session_manager import Session, SessionManager
from ui_session_tools.waits.polling_waiter import PollingWaiter


LIVE_BROWSER = os.getenv("UI_LIVE_BROWSER", "").lower() in ("1", "true", "yes")


def pytest_collection_modifyitems(config, items):
    """Skip live-browser tests unless explicitly enabled."""
    if LIVE_BROWSER:
        return
    skip_live = pytest.mark.skip(reason="set UI_LIVE_BROWSER=1 to run live browser tests")
    for item in items:
        if "ui_testing" in str(item.fspath):
            item.add_marker(skip_live)


# ================================================================================
# Session Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def session_manager() -> Generator[SessionManager, None, None]:
    """
    Session-scoped manager shared by every test in the worker process.

    Each test thread still gets its own browser session.
    """
    manager = SessionManager()
    yield manager
    if manager.active_count():
        logger.warning(f"{manager.active_count()} browser session(s) left open at exit")


@pytest.fixture(scope="function")
def browser_session(session_manager: SessionManager) -> Generator[Session, None, None]:
    """
    Function-scoped browser session.

    Built from configuration on first use and terminated after the test.
    """
    session = session_manager.get_or_create()
    allure.dynamic.parameter("browser", session.label)
    yield session
    session_manager.terminate()


@pytest.fixture(scope="function")
def waiter(browser_session: Session) -> PollingWaiter:
    """PollingWaiter bound to the test's browser session."""
    return PollingWaiter(browser_session, timeout=5)


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Hook to capture screenshots on test failure.

    Takes a screenshot from the test's browser session when a UI test fails
    and attaches it to the Allure report.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        session = getattr(item, "funcargs", {}).get("browser_session")
        if session is None or not session.is_active:
            return
        try:
            allure.attach(
                session.handle.get_screenshot_as_png(),
                name="failure_screenshot",
                attachment_type=allure.attachment_type.PNG,
            )
        except Exception as e:
            # Log but don't fail if screenshot capture fails
            logger.warning(f"Failed to capture screenshot on failure: {e}")
