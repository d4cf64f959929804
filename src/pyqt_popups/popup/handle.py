"""The popup handle returned by ``pyqt_popups.new()``.

Every operation returns the handle, so calls chain::

    p = pyqt_popups.new(lines=["hello"], pos="EDITOR_CENTER")
    p.show().wait(2).fade(1, hide_when_over=True).destroy()

Chained calls are queued and run strictly in order. With ``noqueue=True``
they run immediately instead, and failures are reported through the host
notification channel rather than raised.
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Optional, Union, TYPE_CHECKING

from pyqt_popups.animation.drag import DragController
from pyqt_popups.core.error_reporting import call_reporting_errors, report_ui_error
from pyqt_popups.geometry.engine import GeometryEngine
from pyqt_popups.geometry.rectangle import Rectangle
from pyqt_popups.popup import content
from pyqt_popups.popup.operations import QUEUEABLE, ImmediateOps, PopupOps, QueuedOps
from pyqt_popups.popup.options import PopupOptions
from pyqt_popups.popup.state import PopupState
from pyqt_popups.scheduling.queue_items import Operation
from pyqt_popups.scheduling.scheduler import Scheduler
from pyqt_popups.services.event_bindings import EventBindings
from pyqt_popups.services.popup_registry import PopupRegistry

if TYPE_CHECKING:
    from pyqt_popups.protocols.host_surface import HostSurfaceABC

logger = logging.getLogger(__name__)


class Popup:
    """Chainable handle of one popup."""

    def __init__(self, options: PopupOptions, host: "HostSurfaceABC"):
        self.host = host
        prevwin = options.prevwin if host.is_window_valid(options.prevwin) else host.current_window()
        self.state = PopupState(options=options, prevwin=prevwin, buf=options.buf)
        self.geometry = GeometryEngine(host)
        self.bindings = EventBindings(self)
        self.drag_controller = DragController(self)
        self.immediate = ImmediateOps(self)
        self.queued = QueuedOps(self)
        self.state.scheduler = Scheduler(
            invoke=self._invoke,
            defer=host.defer_callback,
            on_error=lambda error: report_ui_error(host, error),
            name="popup",
        )

    def __repr__(self):
        return f"Popup(id={self.state.id}, namespace={self.options.namespace!r}, win={self.state.win})"

    # ========== STATE ACCESS ==========

    @property
    def id(self) -> int:
        return self.state.id

    @property
    def options(self) -> PopupOptions:
        return self.state.options

    @property
    def scheduler(self) -> Scheduler:
        return self.state.scheduler

    @property
    def win(self) -> Optional[int]:
        return self.state.win

    @property
    def buf(self) -> Optional[int]:
        return self.state.buf

    @property
    def ops(self) -> PopupOps:
        return self.immediate if self.options.noqueue else self.queued

    def replace_options(self, **changes: Any) -> None:
        self.state.options = replace(self.state.options, **changes)

    def assign_id(self, popup_id: int) -> None:
        self.state.id = popup_id
        self.scheduler.name = f"popup#{popup_id}"

    # ========== DISPATCH ==========

    def run_now(self, name: str, *args: Any) -> bool:
        """Run an operation immediately inside the error boundary. Returns success."""
        ok, _ = call_reporting_errors(self.host, name, getattr(self.immediate, name), *args)
        return ok

    def _dispatch(self, method: Callable[..., None], *args: Any) -> "Popup":
        if self.options.noqueue:
            call_reporting_errors(self.host, method.__name__, method, *args)
        else:
            method(*args)
        return self

    def _invoke(self, operation: Operation) -> None:
        if operation.name not in QUEUEABLE:
            raise ValueError(f"Unknown popup operation: {operation.name}")
        getattr(self.immediate, operation.name)(*operation.args)

    # ========== CHAINABLE OPERATIONS ==========

    def show(self, seconds: Optional[float] = None) -> "Popup":
        """Show the popup, for ``seconds`` if given."""
        return self._dispatch(self.ops.show, seconds)

    def hide(self, seconds: Optional[float] = None) -> "Popup":
        """Hide the popup, for ``seconds`` if given."""
        return self._dispatch(self.ops.hide, seconds)

    def redraw(self) -> "Popup":
        return self._dispatch(self.ops.redraw)

    def resize(self) -> "Popup":
        """Forget requested width/height and fit the content again."""
        return self._dispatch(self.ops.resize)

    def configure(self, opts: Optional[dict] = None, **kwargs: Any) -> "Popup":
        """Change options. Without options, just reapply the window configuration."""
        patch = dict(opts or {}, **kwargs)
        return self._dispatch(self.ops.configure, patch or None)

    def notification(self, seconds: Optional[float] = None) -> "Popup":
        return self._dispatch(self.ops.notification, seconds)

    def blend(self, value: Optional[int]) -> "Popup":
        return self._dispatch(self.ops.blend, value)

    def fade(self, seconds: Optional[float] = None, target: Optional[int] = None,
             hide_when_over: bool = False) -> "Popup":
        """Fade toward ``target`` (default 100) over ``seconds``."""
        return self._dispatch(self.ops.fade, seconds, target, hide_when_over)

    def move(self, direction, cells: int = 1, animated: bool = False,
             cells_per_step: Optional[int] = None, interval_ms: Optional[int] = None) -> "Popup":
        return self._dispatch(self.ops.move, direction, cells, animated, cells_per_step, interval_ms)

    def custom(self, relative: Optional[str] = None) -> "Popup":
        """Switch to CUSTOM position at the current location."""
        return self._dispatch(self.ops.custom, relative)

    def destroy(self) -> "Popup":
        return self._dispatch(self.ops.destroy)

    def wait(self, seconds: float = 1) -> "Popup":
        return self._dispatch(self.ops.wait, seconds)

    # ========== NEVER QUEUED ==========

    def is_visible(self) -> bool:
        return self.state.win is not None and self.host.is_window_valid(self.state.win)

    def get_wincfg(self) -> Optional[Rectangle]:
        """Live rectangle of the visible window, else the last resolved one."""
        if self.is_visible():
            return self.host.get_window_rectangle(self.state.win)
        return self.state.resolved

    def hide_now(self) -> "Popup":
        """Drop pending operations and hide immediately."""
        self.scheduler.clear()
        self.run_now("hide")
        return self

    def destroy_now(self) -> "Popup":
        """Drop pending operations and destroy immediately."""
        self.scheduler.clear()
        self.run_now("destroy")
        return self

    def debug(self, key: Union[str, None] = None) -> Any:
        """Log the popup state (or one attribute of it) and return it."""
        if key is None:
            value = self.state
        elif hasattr(self.state, key):
            value = getattr(self.state, key)
        else:
            value = getattr(self.options, key)
        logger.info(f"[POPUP] {self!r} {key or 'state'}: {value!r}")
        return value

    def finalize(self) -> None:
        """Release everything the popup owns. Called once by destroy."""
        self.bindings.dispose()
        self.drag_controller.detach()
        content.release(self)
        self.scheduler.clear()
        PopupRegistry.instance().unregister(self)
        self.state.destroyed = True
        logger.debug(f"[POPUP] Destroyed popup {self.state.id}")
