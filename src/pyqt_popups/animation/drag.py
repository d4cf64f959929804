"""Mouse drag, resize and arrow-key moves for popups created with ``drag=True``.

Handlers mutate the live window directly, outside the operation queue, and
only when the popup window is the current window.
"""

import logging
from dataclasses import replace
from functools import partial
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from pyqt_popups.animation.move import Direction, MoveDriver
from pyqt_popups.core.error_reporting import call_reporting_errors
from pyqt_popups.popup.window import apply_live_rectangle

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup
    from pyqt_popups.protocols.host_surface import HostEvent, MousePosition, Subscription

logger = logging.getLogger(__name__)


class DragController:
    """Input event bindings of one draggable popup."""

    def __init__(self, popup: "Popup"):
        self._popup = popup
        self._buf: Optional[int] = None
        self._subscriptions: List["Subscription"] = []
        self.dragging: Optional["MousePosition"] = None

    def _handlers(self) -> Dict[str, Callable[..., None]]:
        return {
            "<LeftDrag>": self.drag,
            "<LeftRelease>": self.release,
            "<C-LeftDrag>": self.resize,
            "<C-LeftRelease>": self.release,
            "<Up>": partial(self.move, Direction.UP),
            "<Down>": partial(self.move, Direction.DOWN),
            "<Left>": partial(self.move, Direction.LEFT),
            "<Right>": partial(self.move, Direction.RIGHT),
            "<Esc>": self.close,
            "<RightMouse>": self.close,
        }

    @property
    def attached_buffer(self) -> Optional[int]:
        return self._buf

    def attach(self, buf: int) -> None:
        """Bind the input events on ``buf`` (rebinding if the buffer changed)."""
        if buf == self._buf and self._subscriptions:
            return
        self.detach()
        host = self._popup.host
        self._buf = buf
        for event, handler in self._handlers().items():
            self._subscriptions.append(host.on_event([event], buf, partial(self._dispatch, event, handler)))
        logger.debug(f"[DRAG] Bound {len(self._subscriptions)} input events on buffer {buf}")

    def detach(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions = []
        self._buf = None
        self.dragging = None

    def _dispatch(self, name: str, handler: Callable[..., None], event: "HostEvent") -> None:
        # never return a truthy value: it would dispose the subscription
        call_reporting_errors(self._popup.host, name, handler)

    def _is_current(self) -> bool:
        popup = self._popup
        return popup.is_visible() and popup.host.current_window() == popup.state.win

    def drag(self) -> None:
        if not self._is_current():
            return
        popup = self._popup
        popup.immediate.ensure_custom()
        mouse = popup.host.mouse_position()
        if self.dragging is None:
            self.dragging = mouse
        rect = popup.host.get_window_rectangle(popup.state.win)
        apply_live_rectangle(
            popup,
            rect.moved_to(mouse.screenrow - self.dragging.winrow, mouse.screencol - self.dragging.wincol),
        )

    def release(self) -> None:
        if self._is_current():
            self.dragging = None

    def resize(self) -> None:
        """Grow or shrink the side being dragged; the central third is a dead zone."""
        if not self._is_current():
            return
        popup = self._popup
        popup.immediate.ensure_custom()
        mouse = popup.host.mouse_position()
        rect = popup.host.get_window_rectangle(popup.state.win)
        last = self.dragging or mouse
        row, col, width, height = rect.row, rect.col, rect.width, rect.height

        left_side = mouse.screencol < col + width / 3
        right_side = mouse.screencol > col + width / 3 * 2
        top_side = mouse.screenrow < row + height / 3
        bottom_side = mouse.screenrow > row + height / 3 * 2
        self.dragging = mouse

        if mouse.screencol < last.screencol:
            if left_side:
                col, width = col - 1, width + 1
            elif right_side:
                width -= 1
        elif mouse.screencol > last.screencol:
            if left_side:
                col, width = col + 1, width - 1
            elif right_side:
                width += 1

        if mouse.screenrow < last.screenrow:
            if top_side:
                row, height = row - 1, height + 1
            elif bottom_side:
                height -= 1
        elif mouse.screenrow > last.screenrow:
            if top_side:
                row, height = row + 1, height - 1
            elif bottom_side:
                height += 1

        apply_live_rectangle(
            popup,
            replace(rect, row=max(row, 0), col=max(col, 0), width=max(width, 1), height=max(height, 1)),
        )

    def move(self, direction: Direction, cells: int = 1) -> None:
        if not self._is_current():
            return
        self._popup.immediate.ensure_custom()
        MoveDriver(self._popup).step(direction, cells)

    def close(self) -> None:
        if not self._is_current():
            return
        self.dragging = None
        self._popup.run_now("hide")
