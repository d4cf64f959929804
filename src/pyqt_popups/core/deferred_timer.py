"""Deferred callbacks on top of QTimer."""

import logging
from typing import Callable, Optional, Protocol, Set

from PyQt6.QtCore import QTimer

logger = logging.getLogger(__name__)


class DeferredCall(Protocol):
    """Handle for a callback scheduled with a Deferrer."""

    def cancel(self) -> None:
        ...

    @property
    def pending(self) -> bool:
        ...


class Deferrer(Protocol):
    """Anything able to run a callback after a delay on the UI thread."""

    def call_later(self, fn: Callable[[], None], delay_ms: int) -> DeferredCall:
        ...


class QtDeferredCall:
    """
    Single-shot timer wrapper returned by QtDeferrer.

    Keeps the QTimer alive until it fires or is cancelled.
    """

    def __init__(self, owner: "QtDeferrer", fn: Callable[[], None], delay_ms: int):
        self._owner = owner
        self._fn = fn
        self._timer: Optional[QTimer] = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(max(0, int(delay_ms)))

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _fire(self):
        self._release()
        self._fn()

    def cancel(self):
        """Cancel the pending call."""
        if self._timer is not None:
            self._timer.stop()
        self._release()

    def _release(self):
        self._timer = None
        self._owner._active.discard(self)


class QtDeferrer:
    """
    Deferrer driven by the Qt event loop.

    Usage:
        deferrer = QtDeferrer()
        call = deferrer.call_later(popup.hide_now, 3000)
        call.cancel()  # optional
    """

    def __init__(self):
        self._active: Set[QtDeferredCall] = set()

    @property
    def pending_count(self) -> int:
        return len(self._active)

    def call_later(self, fn: Callable[[], None], delay_ms: int) -> QtDeferredCall:
        call = QtDeferredCall(self, fn, delay_ms)
        self._active.add(call)
        return call

    def cancel_all(self):
        """Stop every timer that has not fired yet."""
        for call in list(self._active):
            call.cancel()
        logger.debug("[DEFER] Cancelled all pending Qt timers")
