"""
Repository-level pytest configuration.

Why this exists:
  - Initialize logging once for the whole run
  - Keep live-browser runs headless unless the caller says otherwise
  - Expose the repo root to tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from ui_session_tools.common import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _logging_and_safe_defaults() -> Generator[None, None, None]:
    """
    Set safe environment defaults if not already provided by the user/CI.

    CI agents rarely have a display, so live sessions default to headless.
    """
    os.environ.setdefault("BROWSER_HEADLESS", "true")
    init_logger()

    yield
