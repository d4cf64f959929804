"""Headless host surface.

InMemoryHost keeps buffers, windows, highlights and event subscriptions in
plain Python objects and defers callbacks on a Deferrer (a ManualClock by
default, or a QtDeferrer inside a running Qt application). It is what the
test-suite drives, and it is a working host for applications that render the
popup model themselves.

Example:

    host = InMemoryHost(rows=24, cols=80)
    pyqt_popups.setup(host)
    p = pyqt_popups.new(lines=["saved"], noqueue=True).show(2)
    host.clock.advance(2000)   # popup hidden again
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from pyqt_popups.core.deferred_timer import DeferredCall, Deferrer
from pyqt_popups.core.manual_clock import ManualClock
from pyqt_popups.geometry.rectangle import Rectangle
from pyqt_popups.protocols.host_surface import (
    BufferHandle,
    HighlightDefinition,
    HostEvent,
    HostSurfaceABC,
    MousePosition,
    ScreenMetrics,
    WindowHandle,
    WindowMetrics,
)
from pyqt_popups.theming.color_math import hex_to_rgb, rgb_to_int

logger = logging.getLogger(__name__)

MAIN_WINDOW = 1
# follow at most this many highlight links
MAX_LINK_DEPTH = 16


@dataclass
class _Buffer:
    lines: List[str]
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class _Window:
    buf: BufferHandle
    rectangle: Rectangle
    options: Dict[str, Any] = field(default_factory=dict)
    cursor: Tuple[int, int] = (1, 0)


@dataclass
class _Highlight:
    foreground: Optional[int] = None
    background: Optional[int] = None
    link: Optional[str] = None


class _Subscription:
    def __init__(self, host: "InMemoryHost", events: Tuple[str, ...], scope: Any,
                 callback: Callable[[HostEvent], Any]):
        self._host = host
        self.events = events
        self.scope = scope
        self.callback = callback
        self.disposed = False

    def matches(self, name: str, scope: Any) -> bool:
        return not self.disposed and name in self.events and (self.scope is None or self.scope == scope)

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self._host._subscriptions.remove(self)


class InMemoryHost(HostSurfaceABC):
    """
    Complete HostSurface without any real editor behind it.

    Args:
        rows: Screen rows (including the command line)
        cols: Screen columns
        cmdline_height: Rows taken by the command line
        tab_bar_visible: Whether a tab bar takes the first row
        true_color: Whether blending is supported
        showbreak: Prefix shown on wrapped continuation rows
        clock: Deferrer used by defer_callback (a fresh ManualClock if None)
    """

    def __init__(
        self,
        rows: int = 40,
        cols: int = 120,
        cmdline_height: int = 1,
        tab_bar_visible: bool = False,
        true_color: bool = True,
        showbreak: str = "",
        clock: Optional[Deferrer] = None,
    ):
        self.rows = rows
        self.cols = cols
        self.cmdline_height = cmdline_height
        self.tab_bar_visible = tab_bar_visible
        self.true_color = true_color
        self.showbreak = showbreak
        self.clock = clock if clock is not None else ManualClock()

        self.buffers: Dict[BufferHandle, _Buffer] = {}
        self.windows: Dict[WindowHandle, _Window] = {}
        self.highlights: Dict[str, _Highlight] = {}
        self.notifications: List[Tuple[str, str]] = []
        self.window_option_log: List[Tuple[WindowHandle, str, Any]] = []
        self.mouse = MousePosition(screenrow=0, screencol=0)
        self.cursor: Tuple[int, int] = (0, 0)  # screen position of the text cursor
        self._subscriptions: List[_Subscription] = []
        self._buffer_ids = itertools.count(1)
        self._window_ids = itertools.count(1000)

        main_buf = self.create_buffer([""])
        self.windows[MAIN_WINDOW] = _Window(
            buf=main_buf,
            rectangle=Rectangle(relative="editor", width=cols, height=rows - cmdline_height),
        )
        self._current = MAIN_WINDOW

    # ========== BUFFERS ==========

    def create_buffer(self, lines: Sequence[str]) -> BufferHandle:
        buf = next(self._buffer_ids)
        self.buffers[buf] = _Buffer(lines=list(lines) or [""])
        return buf

    def _buffer(self, buf: BufferHandle) -> _Buffer:
        try:
            return self.buffers[buf]
        except KeyError:
            raise ValueError(f"Invalid buffer id: {buf}") from None

    def set_buffer_lines(self, buf: BufferHandle, lines: Sequence[str]) -> None:
        self._buffer(buf).lines = list(lines) or [""]

    def get_buffer_lines(self, buf: BufferHandle) -> List[str]:
        return list(self._buffer(buf).lines)

    def is_buffer_valid(self, buf: Optional[BufferHandle]) -> bool:
        return buf in self.buffers

    def delete_buffer(self, buf: BufferHandle) -> None:
        self._buffer(buf)
        for win in [w for w, window in self.windows.items() if window.buf == buf and w != MAIN_WINDOW]:
            self.close_window(win)
        del self.buffers[buf]

    def set_buffer_option(self, buf: BufferHandle, name: str, value: Any) -> None:
        self._buffer(buf).options[name] = value

    def get_buffer_option(self, buf: BufferHandle, name: str) -> Any:
        options = self._buffer(buf).options
        if name == "textwidth":
            return options.get(name, 0)
        return options.get(name)

    def set_buffer_text(self, buf: BufferHandle, lines: Sequence[str]) -> None:
        """Replace lines as a user edit would, firing TextChanged."""
        self.set_buffer_lines(buf, lines)
        self.fire_event("TextChanged", buf)

    # ========== WINDOWS ==========

    def _window(self, win: WindowHandle) -> _Window:
        try:
            return self.windows[win]
        except KeyError:
            raise ValueError(f"Invalid window id: {win}") from None

    def open_window(self, buf: BufferHandle, enter: bool, rectangle: Rectangle) -> WindowHandle:
        self._buffer(buf)
        win = next(self._window_ids)
        self.windows[win] = _Window(buf=buf, rectangle=rectangle)
        if enter:
            self._current = win
        logger.debug(f"[HOST] Opened window {win} for buffer {buf}")
        return win

    def reconfigure_window(self, win: WindowHandle, rectangle: Rectangle) -> None:
        self._window(win).rectangle = rectangle

    def close_window(self, win: WindowHandle) -> None:
        if win == MAIN_WINDOW:
            raise ValueError("Cannot close the main window")
        self._window(win)
        del self.windows[win]
        if self._current == win:
            self._current = MAIN_WINDOW

    def is_window_valid(self, win: Optional[WindowHandle]) -> bool:
        return win in self.windows

    def get_window_rectangle(self, win: WindowHandle) -> Rectangle:
        return self._window(win).rectangle

    def get_window_metrics(self, win: WindowHandle) -> WindowMetrics:
        rect = self._window(win).rectangle
        row, col = rect.row, rect.col
        if rect.relative == "win" and rect.win is not None and rect.win != win:
            anchor = self.get_window_metrics(rect.win)
            row, col = row + anchor.row, col + anchor.col
        elif rect.relative == "cursor":
            row, col = row + self.cursor[0], col + self.cursor[1]
        return WindowMetrics(row=row, col=col, width=rect.width, height=rect.height)

    def set_window_buffer(self, win: WindowHandle, buf: BufferHandle) -> None:
        self._buffer(buf)
        self._window(win).buf = buf

    def get_window_buffer(self, win: WindowHandle) -> BufferHandle:
        return self._window(win).buf

    def set_window_cursor(self, win: WindowHandle, row: int, col: int) -> None:
        self._window(win).cursor = (row, col)

    def current_window(self) -> WindowHandle:
        return self._current

    def set_current_window(self, win: WindowHandle) -> None:
        self._window(win)
        self._current = win

    def set_window_option(self, win: WindowHandle, name: str, value: Any) -> None:
        self._window(win).options[name] = value
        self.window_option_log.append((win, name, value))

    def get_window_option(self, win: WindowHandle, name: str) -> Any:
        return self._window(win).options.get(name)

    # ========== HIGHLIGHTS ==========

    def resolve_highlight(self, group: str) -> HighlightDefinition:
        highlight = self.highlights.get(group)
        depth = 0
        while highlight is not None and highlight.link is not None and depth < MAX_LINK_DEPTH:
            highlight = self.highlights.get(highlight.link)
            depth += 1
        if highlight is None:
            return HighlightDefinition(foreground=None, background=None)
        return HighlightDefinition(foreground=highlight.foreground, background=highlight.background)

    def define_highlight(
        self,
        group: str,
        foreground: Optional[str] = None,
        background: Optional[str] = None,
        link: Optional[str] = None,
    ) -> None:
        if link is not None:
            self.highlights[group] = _Highlight(link=link)
            return
        self.highlights[group] = _Highlight(
            foreground=rgb_to_int(hex_to_rgb(foreground)) if foreground else None,
            background=rgb_to_int(hex_to_rgb(background)) if background else None,
        )

    # ========== EVENTS, TIMERS, SCREEN ==========

    def on_event(self, events: Iterable[str], scope: Any, callback: Callable[[HostEvent], Any]) -> _Subscription:
        subscription = _Subscription(self, tuple(events), scope, callback)
        self._subscriptions.append(subscription)
        return subscription

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def fire_event(self, name: str, scope: Any = None) -> int:
        """Deliver ``name`` to matching subscribers. Returns how many were called."""
        called = 0
        for subscription in list(self._subscriptions):
            if not subscription.matches(name, scope):
                continue
            called += 1
            if subscription.callback(HostEvent(name=name, scope=scope)):
                subscription.dispose()
        return called

    def defer_callback(self, fn: Callable[[], None], delay_ms: int) -> DeferredCall:
        return self.clock.call_later(fn, delay_ms)

    def current_screen_metrics(self) -> ScreenMetrics:
        return ScreenMetrics(
            rows=self.rows,
            cols=self.cols,
            cmdline_height=self.cmdline_height,
            tab_bar_visible=self.tab_bar_visible,
            true_color=self.true_color,
            showbreak=self.showbreak,
        )

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((level, message))

    def mouse_position(self) -> MousePosition:
        return self.mouse
