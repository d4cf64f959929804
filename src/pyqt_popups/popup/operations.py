"""The two operation interfaces of a popup.

ImmediateOps holds the real logic of every operation. QueuedOps captures the
same calls as immutable queue items which the popup's Scheduler later hands
back to ImmediateOps, one at a time.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Mapping, Optional, TYPE_CHECKING

from pyqt_popups.animation.fade import FadeDriver
from pyqt_popups.animation.move import MoveDriver
from pyqt_popups.exceptions import InvalidContentError, InvalidWindowError
from pyqt_popups.geometry.engine import clamp
from pyqt_popups.geometry.positions import Position
from pyqt_popups.popup import content
from pyqt_popups.popup.options import PopupOptions
from pyqt_popups.popup.window import open_popup_window, resolve_rectangle
from pyqt_popups.protocols.popup_config import get_popup_config
from pyqt_popups.scheduling.queue_items import Block, Operation, Wait
from pyqt_popups.theming.themes import ThemeManager

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup

logger = logging.getLogger(__name__)

# Operations the scheduler may dispatch to ImmediateOps
QUEUEABLE = frozenset(
    {"show", "hide", "redraw", "resize", "configure", "notification", "blend",
     "fade", "move", "custom", "destroy"}
)


def seconds_to_ms(seconds: float) -> int:
    return max(0, int(round(float(seconds) * 1000)))


class PopupOps(ABC):
    """Operations shared by the immediate and the queued interface."""

    def __init__(self, popup: "Popup"):
        self._popup = popup

    @abstractmethod
    def show(self, seconds: Optional[float] = None) -> None: ...

    @abstractmethod
    def hide(self, seconds: Optional[float] = None) -> None: ...

    @abstractmethod
    def redraw(self) -> None: ...

    @abstractmethod
    def resize(self) -> None: ...

    @abstractmethod
    def configure(self, opts: Optional[Mapping[str, Any]] = None) -> None: ...

    @abstractmethod
    def notification(self, seconds: Optional[float] = None) -> None: ...

    @abstractmethod
    def blend(self, value: Optional[int]) -> None: ...

    @abstractmethod
    def fade(self, seconds: Optional[float] = None, target: Optional[int] = None,
             hide_when_over: bool = False) -> None: ...

    @abstractmethod
    def move(self, direction, cells: int = 1, animated: bool = False,
             cells_per_step: Optional[int] = None, interval_ms: Optional[int] = None) -> None: ...

    @abstractmethod
    def custom(self, relative: Optional[str] = None) -> None: ...

    @abstractmethod
    def destroy(self) -> None: ...

    @abstractmethod
    def wait(self, seconds: float = 1) -> None: ...


class ImmediateOps(PopupOps):
    """Applies every operation right away. Failures raise."""

    def show(self, seconds: Optional[float] = None) -> None:
        popup = self._popup
        host, state = popup.host, popup.state
        if state.destroyed:
            raise InvalidContentError(f"Popup {state.id} was destroyed")

        content.prepare(popup, update_visible=False)
        popup.bindings.on_show()
        win = open_popup_window(popup)
        ThemeManager.instance().apply(host, win, popup.options.theme, popup.options.winopts)
        # undoes any fade
        host.set_window_option(win, "winblend", state.blend_level)
        state.live_blend = state.blend_level
        logger.debug(f"[POPUP] Shown popup {state.id} in window {win}")

        if popup.options.on_show is not None:
            popup.options.on_show(popup)
        if seconds and popup.options.noqueue:
            host.defer_callback(lambda: popup.run_now("hide"), seconds_to_ms(seconds))

    def hide(self, seconds: Optional[float] = None) -> None:
        popup = self._popup
        host, state = popup.host, popup.state
        if popup.is_visible():
            if popup.options.on_hide is not None and popup.options.on_hide(popup):
                logger.debug(f"[POPUP] Hiding popup {state.id} vetoed by on_hide")
                return
            host.close_window(state.win)
            logger.debug(f"[POPUP] Hidden popup {state.id}")
        popup.bindings.dispose()
        if seconds and popup.options.noqueue:
            host.defer_callback(lambda: popup.run_now("show"), seconds_to_ms(seconds))

    def redraw(self) -> None:
        popup = self._popup
        if not popup.is_visible():
            return
        if popup.state.pending_buf is not None:
            self.show()
            return
        popup.host.reconfigure_window(popup.state.win, resolve_rectangle(popup))

    def resize(self) -> None:
        popup = self._popup
        popup.replace_options(wincfg=popup.options.wincfg.without_size())
        self.redraw()

    def configure(self, opts: Optional[Mapping[str, Any]] = None) -> None:
        popup = self._popup
        if not opts:
            if popup.is_visible():
                popup.host.reconfigure_window(popup.state.win, resolve_rectangle(popup))
            return

        patch = PopupOptions.normalize_patch(opts)
        if "namespace" in patch and patch["namespace"] != popup.options.namespace:
            raise ValueError("A popup's namespace can't be changed after creation")

        buf = patch.get("buf")
        if buf is not None and buf != popup.state.buf:
            popup.state.pending_buf = buf
            popup.state.options = popup.options.updated(patch)
            content.prepare(popup)
        elif set(patch) <= {"wincfg"} and popup.is_visible():
            popup.state.options = popup.options.updated(patch)
            popup.host.reconfigure_window(popup.state.win, resolve_rectangle(popup))
        else:
            popup.state.options = popup.options.updated(patch)
            content.prepare(popup)

    def notification(self, seconds: Optional[float] = None) -> None:
        popup = self._popup
        popup.replace_options(pos=Position.EDITOR_TOPRIGHT)
        if popup.options.noqueue:
            self.show(get_popup_config().notification_seconds if seconds is None else seconds)

    def blend(self, value: Optional[int]) -> None:
        """Store the blend level. A hidden popup gets it at its next show."""
        if value is None:
            return
        popup = self._popup
        level = clamp(int(value), 0, 100)
        popup.state.blend_level = level
        if popup.host.current_screen_metrics().true_color and popup.is_visible():
            popup.host.set_window_option(popup.state.win, "winblend", level)
            popup.state.live_blend = level

    def fade(self, seconds: Optional[float] = None, target: Optional[int] = None,
             hide_when_over: bool = False) -> None:
        FadeDriver(self._popup).start(seconds, target, hide_when_over)

    def move(self, direction, cells: int = 1, animated: bool = False,
             cells_per_step: Optional[int] = None, interval_ms: Optional[int] = None) -> None:
        MoveDriver(self._popup).start(direction, cells, animated, cells_per_step, interval_ms)

    def custom(self, relative: Optional[str] = None) -> None:
        """Switch to CUSTOM, keeping the window exactly where it is."""
        popup = self._popup
        host, state = popup.host, popup.state
        if not popup.is_visible():
            raise InvalidWindowError("Cannot convert a popup that is not visible")
        relative = relative or "editor"
        if relative not in ("editor", "win"):
            raise ValueError(f"Custom placement can't be relative to {relative!r}")

        live = host.get_window_metrics(state.win)
        row, col = live.row, live.col
        if relative == "win":
            anchor = host.get_window_metrics(popup.geometry.anchor_window(state.prevwin))
            row, col = row - anchor.row, col - anchor.col
        wincfg = replace(
            popup.options.wincfg, relative=relative, row=row, col=col,
            width=live.width, height=live.height,
        )
        popup.replace_options(pos=Position.CUSTOM, wincfg=wincfg)
        host.reconfigure_window(state.win, resolve_rectangle(popup))

    def ensure_custom(self) -> None:
        if self._popup.options.pos is not Position.CUSTOM:
            self.custom()

    def destroy(self) -> None:
        popup = self._popup
        if popup.state.destroyed:
            return
        if popup.options.on_dispose is not None and popup.options.on_dispose(popup):
            logger.debug(f"[POPUP] Destroying popup {popup.state.id} vetoed by on_dispose")
            return
        self.hide()
        popup.finalize()

    def wait(self, seconds: float = 1) -> None:
        # nothing to wait for when operations run immediately
        return None


class QueuedOps(PopupOps):
    """Appends operations to the popup's Scheduler and lets it advance."""

    def _push(self, item) -> None:
        scheduler = self._popup.scheduler
        scheduler.enqueue(item)
        scheduler.advance()

    def _timed(self, first: str, second: str, seconds: Optional[float]):
        if not seconds:
            return Operation(first)
        return Block((Operation(first), Wait(seconds_to_ms(seconds)), Operation(second)))

    def show(self, seconds: Optional[float] = None) -> None:
        self._push(self._timed("show", "hide", seconds))

    def hide(self, seconds: Optional[float] = None) -> None:
        self._push(self._timed("hide", "show", seconds))

    def redraw(self) -> None:
        self._push(Operation("redraw"))

    def resize(self) -> None:
        self._push(Operation("resize"))

    def configure(self, opts: Optional[Mapping[str, Any]] = None) -> None:
        frozen = MappingProxyType(PopupOptions.normalize_patch(opts)) if opts else None
        self._push(Operation("configure", (frozen,)))

    def notification(self, seconds: Optional[float] = None) -> None:
        if seconds is None:
            seconds = get_popup_config().notification_seconds
        self._push(Block((Operation("notification"), self._timed("show", "hide", seconds))))

    def blend(self, value: Optional[int]) -> None:
        self._push(Operation("blend", (value,)))

    def fade(self, seconds: Optional[float] = None, target: Optional[int] = None,
             hide_when_over: bool = False) -> None:
        self._push(Operation("fade", (seconds, target, hide_when_over)))

    def move(self, direction, cells: int = 1, animated: bool = False,
             cells_per_step: Optional[int] = None, interval_ms: Optional[int] = None) -> None:
        self._push(Operation("move", (direction, cells, animated, cells_per_step, interval_ms)))

    def custom(self, relative: Optional[str] = None) -> None:
        self._push(Operation("custom", (relative,)))

    def destroy(self) -> None:
        self._push(Operation("destroy"))

    def wait(self, seconds: float = 1) -> None:
        self._push(Wait(seconds_to_ms(seconds)))
