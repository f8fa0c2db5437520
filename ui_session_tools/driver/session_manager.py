"""
================================================================================
Session Manager
================================================================================

Per-thread browser session lifecycle management for parallel UI testing.

Features:
    - One exclusively owned WebDriver per thread, never shared
    - Lazy creation from configuration, explicit re-initialization per variant
    - Teardown that never fails the test it runs in
    - Active session counting and per-thread variant labels for reporting

Only the registry maps are shared between threads. They are guarded by a
short lock that is never held while a browser starts or quits.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterator, Optional, Union

from loguru import logger
from selenium.webdriver.remote.webdriver import WebDriver

from ..common.config_loader import BrowserSettings
from .browser_variant import BrowserVariant
from .driver_factory import DriverFactory, DEFAULT_WINDOW_HEIGHT, DEFAULT_WINDOW_WIDTH


EXTERNAL_LABEL = "External"


class SessionState(str, Enum):
    """Lifecycle states of a Session."""
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    TERMINATED = "terminated"


@dataclass
class Session:
    """
    A WebDriver bound to the thread that created it.

    Attributes:
        owner_id: Identifier of the owning thread
        variant: Variant the driver was built for (None when adopted)
        handle: The WebDriver
        state: Lifecycle state
        created_at: Creation timestamp
    """
    owner_id: Hashable
    variant: Optional[BrowserVariant]
    handle: WebDriver
    state: SessionState = SessionState.ACTIVE
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def label(self) -> str:
        return self.variant.display_name if self.variant else EXTERNAL_LABEL

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE


class SessionManager:
    """
    Owns the mapping from execution thread to its browser session.

    Construct one instance per process and pass it to whoever needs it
    (see the ``session_manager`` pytest fixture).

    Usage:
        manager = SessionManager()

        session = manager.get_or_create()
        session.handle.get("https://example.com")
        manager.terminate()

        # Or scoped
        with manager.session(BrowserVariant.CHROME_HEADLESS) as session:
            session.handle.get("https://example.com")
    """

    def __init__(
        self,
        config: Any = None,
        factory: Optional[DriverFactory] = None,
        key_func: Callable[[], Hashable] = threading.get_ident,
    ):
        """
        Initialize session manager.

        Args:
            config: Object exposing ``get(key, default)``; the process-wide
                ConfigLoader is used when omitted
            factory: Driver factory (built from ``config`` when omitted)
            key_func: Returns the identifier of the calling worker
        """
        self._config = config
        self._factory = factory or DriverFactory(config)
        self._key_func = key_func

        self._sessions: Dict[Hashable, Session] = {}
        self._labels: Dict[Hashable, str] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Creation
    # =========================================================================

    def get_or_create(self) -> Session:
        """
        Return the calling thread's session, creating it from configuration.

        Repeated calls before terminate() return the same session.
        """
        existing = self.get()
        if existing is not None:
            return existing

        settings = BrowserSettings.from_config(self._config)
        variant = BrowserVariant.parse(settings.browser_name)
        if settings.headless and not variant.is_headless():
            variant = variant.headless_variant()

        return self._create(variant, settings)

    def create_with_variant(self, variant: Union[BrowserVariant, str]) -> Session:
        """
        Replace the calling thread's session with a fresh one of ``variant``.

        Any existing session of this thread is terminated first.
        """
        if not isinstance(variant, BrowserVariant):
            variant = BrowserVariant.parse(variant)

        if self.get() is not None:
            self.terminate()

        settings = BrowserSettings.from_config(self._config)
        return self._create(variant, settings)

    def build(
        self,
        variant: Union[BrowserVariant, str],
        headless: bool = False,
        width: int = DEFAULT_WINDOW_WIDTH,
        height: int = DEFAULT_WINDOW_HEIGHT,
        *extra_args: str,
    ) -> WebDriver:
        """
        Build a driver without registering it.

        Raises:
            SessionCreationError: If the driver cannot be built
        """
        return self._factory.build(variant, headless, width, height, *extra_args)

    def _create(self, variant: BrowserVariant, settings: BrowserSettings) -> Session:
        key = self._key_func()
        handle = self._factory.build(
            variant,
            settings.headless,
            settings.window_width,
            settings.window_height,
            settings=settings,
        )
        session = Session(owner_id=key, variant=variant, handle=handle)
        self._register(key, session)

        logger.info(f"Session created for thread {key}: {session.label}")
        return session

    # =========================================================================
    # Registry Access
    # =========================================================================

    def get(self) -> Optional[Session]:
        """Return the calling thread's session without creating one."""
        return self._sessions.get(self._key_func())

    def set(self, handle: WebDriver, variant: Optional[BrowserVariant] = None) -> Session:
        """
        Adopt an externally built driver as the calling thread's session.

        A session previously registered for this thread is replaced, not
        terminated; the caller is responsible for quitting it. The replaced
        Session object no longer belongs to the registry: its ``state`` is
        left as it was, and terminate() will not reach its handle.
        """
        key = self._key_func()
        session = Session(owner_id=key, variant=variant, handle=handle)
        previous = self._register(key, session)
        if previous is not None and previous.handle is not handle:
            logger.warning(
                f"Thread {key} adopted a new driver over an unterminated "
                f"{previous.label} session"
            )
        return session

    def is_initialized(self) -> bool:
        """Check whether the calling thread has a session."""
        return self.get() is not None

    def active_count(self) -> int:
        """Number of registered sessions across all threads (advisory)."""
        return len(self._sessions)

    def current_variant_label(self) -> Optional[str]:
        """Display label of the calling thread's session, for reporting."""
        return self._labels.get(self._key_func())

    def _register(self, key: Hashable, session: Session) -> Optional[Session]:
        with self._lock:
            previous = self._sessions.get(key)
            self._sessions[key] = session
            self._labels[key] = session.label
        return previous

    def _unregister(self, key: Hashable) -> None:
        with self._lock:
            self._sessions.pop(key, None)
            self._labels.pop(key, None)

    # =========================================================================
    # Teardown
    # =========================================================================

    def terminate(self) -> None:
        """
        Quit the calling thread's session and forget it.

        Quit failures are logged, never raised. Safe to call without a
        session and safe to call repeatedly.
        """
        key = self._key_func()
        session = self._sessions.get(key)
        if session is None:
            return

        try:
            session.handle.quit()
            logger.info(f"Session terminated for thread {key}: {session.label}")
        except Exception as e:
            logger.warning(f"Error while quitting WebDriver for thread {key}: {e}")
        finally:
            session.state = SessionState.TERMINATED
            self._unregister(key)

    @contextmanager
    def session(
        self,
        variant: Union[BrowserVariant, str, None] = None,
    ) -> Iterator[Session]:
        """
        Scope a session to a ``with`` block.

        Args:
            variant: Build a fresh session of this variant; use
                get_or_create() semantics when omitted
        """
        if variant is None:
            current = self.get_or_create()
        else:
            current = self.create_with_variant(variant)
        try:
            yield current
        finally:
            self.terminate()


__all__ = [
    "Session",
    "SessionState",
    "SessionManager",
    "EXTERNAL_LABEL",
]
