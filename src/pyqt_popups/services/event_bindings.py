"""Host-event subscriptions of a visible popup.

Subscriptions are made one tick after each show, once the window exists, and
all of them are disposed when the popup is hidden.
"""

import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

from pyqt_popups.protocols.popup_config import get_popup_config

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup
    from pyqt_popups.protocols.host_surface import HostEvent, Subscription

logger = logging.getLogger(__name__)


def default_hide_on(enter: bool, follow: bool) -> Tuple[str, ...]:
    if enter:
        return ("WinLeave",)
    if follow:
        return ("CursorMovedI", "BufLeave")
    return tuple(get_popup_config().default_hide_on)


class EventBindings:
    """Subscribes a popup to the host events it reacts to."""

    def __init__(self, popup: "Popup"):
        self._popup = popup
        self._subscriptions: List["Subscription"] = []
        # bumped on every show/dispose so stale deferred binds are skipped
        self._generation = 0

    @property
    def subscriptions(self) -> List["Subscription"]:
        return list(self._subscriptions)

    def on_show(self) -> None:
        self._generation += 1
        generation = self._generation
        self._popup.host.defer_callback(lambda: self._bind(generation), 0)

    def dispose(self) -> None:
        self._generation += 1
        for subscription in self._subscriptions:
            subscription.dispose()
        if self._subscriptions:
            logger.debug(f"[EVENTS] Disposed {len(self._subscriptions)} subscriptions of popup {self._popup.id}")
        self._subscriptions = []

    def _bind(self, generation: int) -> None:
        popup = self._popup
        if generation != self._generation or not popup.is_visible():
            return
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions = []

        host, options, state = popup.host, popup.options, popup.state
        if options.autoresize:
            self._subscriptions.append(host.on_event(["TextChanged"], state.buf, self._redraw))
        if options.follow and options.bufbind is not None:
            self._subscriptions.append(host.on_event(["CursorMoved"], options.bufbind, self._redraw))
        if options.enter and host.current_window() != state.win:
            host.set_current_window(state.win)

        hide_on = options.hide_on
        if hide_on is None:
            hide_on = default_hide_on(options.enter, options.follow)
        if hide_on:
            self._subscriptions.append(host.on_event(list(hide_on), None, self._hide))
        logger.debug(f"[EVENTS] Popup {popup.id} bound {len(self._subscriptions)} subscriptions")

    def _redraw(self, event: "HostEvent") -> None:
        self._popup.run_now("redraw")

    def _hide(self, event: "HostEvent") -> Optional[bool]:
        self._popup.hide_now()
        # one-shot
        return True
