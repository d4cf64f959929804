"""Host surface protocol and ABC.

The host (an editor or any terminal-like UI) owns buffers, windows, options,
highlight groups, events and timers. Popups only talk to it through this
interface. Applications subclass HostSurfaceABC and hand an instance to
``pyqt_popups.setup()``.

Example:
    class MyEditorHost(HostSurfaceABC):
        def create_buffer(self, lines):
            return self._api.create_buf(lines)
        ...

    pyqt_popups.setup(MyEditorHost())
"""

import logging
import unicodedata
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Protocol, Sequence

from pyqt_popups.core.deferred_timer import DeferredCall
from pyqt_popups.geometry.rectangle import Rectangle

logger = logging.getLogger(__name__)

BufferHandle = int
WindowHandle = int


@dataclass(frozen=True)
class ScreenMetrics:
    """Current size of the host screen, in cells."""

    rows: int
    cols: int
    cmdline_height: int = 1
    tab_bar_visible: bool = False
    true_color: bool = True
    showbreak: str = ""


@dataclass(frozen=True)
class WindowMetrics:
    """On-screen position and size of a window."""

    row: int
    col: int
    width: int
    height: int


@dataclass(frozen=True)
class HighlightDefinition:
    """Resolved colors of a highlight group as 0xRRGGBB integers (None when unset)."""

    foreground: Optional[int] = None
    background: Optional[int] = None


@dataclass(frozen=True)
class MousePosition:
    """Mouse position in screen cells."""

    screenrow: int
    screencol: int
    winrow: int = 0
    wincol: int = 0
    winid: Optional[WindowHandle] = None


@dataclass(frozen=True)
class HostEvent:
    """Event delivered to subscription callbacks."""

    name: str
    scope: Any = None


class Subscription(Protocol):
    """Disposable event subscription returned by ``on_event``."""

    def dispose(self) -> None:
        ...


class HostSurfaceABC(ABC):
    """
    Abstract host surface.

    Callbacks registered with ``on_event`` may return a truthy value to be
    removed after running (one-shot subscriptions).
    """

    # ========== BUFFERS ==========

    @abstractmethod
    def create_buffer(self, lines: Sequence[str]) -> BufferHandle:
        ...

    @abstractmethod
    def set_buffer_lines(self, buf: BufferHandle, lines: Sequence[str]) -> None:
        ...

    @abstractmethod
    def get_buffer_lines(self, buf: BufferHandle) -> List[str]:
        ...

    @abstractmethod
    def is_buffer_valid(self, buf: Optional[BufferHandle]) -> bool:
        ...

    @abstractmethod
    def delete_buffer(self, buf: BufferHandle) -> None:
        ...

    @abstractmethod
    def set_buffer_option(self, buf: BufferHandle, name: str, value: Any) -> None:
        ...

    @abstractmethod
    def get_buffer_option(self, buf: BufferHandle, name: str) -> Any:
        ...

    # ========== WINDOWS ==========

    @abstractmethod
    def open_window(self, buf: BufferHandle, enter: bool, rectangle: Rectangle) -> WindowHandle:
        ...

    @abstractmethod
    def reconfigure_window(self, win: WindowHandle, rectangle: Rectangle) -> None:
        ...

    @abstractmethod
    def close_window(self, win: WindowHandle) -> None:
        ...

    @abstractmethod
    def is_window_valid(self, win: Optional[WindowHandle]) -> bool:
        ...

    @abstractmethod
    def get_window_rectangle(self, win: WindowHandle) -> Rectangle:
        """Configuration the window currently has (row/col in its own frame)."""
        ...

    @abstractmethod
    def get_window_metrics(self, win: WindowHandle) -> WindowMetrics:
        """Absolute on-screen position and size of any window."""
        ...

    @abstractmethod
    def set_window_buffer(self, win: WindowHandle, buf: BufferHandle) -> None:
        ...

    @abstractmethod
    def set_window_cursor(self, win: WindowHandle, row: int, col: int) -> None:
        ...

    @abstractmethod
    def current_window(self) -> WindowHandle:
        ...

    @abstractmethod
    def set_current_window(self, win: WindowHandle) -> None:
        ...

    @abstractmethod
    def set_window_option(self, win: WindowHandle, name: str, value: Any) -> None:
        ...

    @abstractmethod
    def get_window_option(self, win: WindowHandle, name: str) -> Any:
        ...

    # ========== HIGHLIGHTS ==========

    @abstractmethod
    def resolve_highlight(self, group: str) -> HighlightDefinition:
        ...

    @abstractmethod
    def define_highlight(
        self,
        group: str,
        foreground: Optional[str] = None,
        background: Optional[str] = None,
        link: Optional[str] = None,
    ) -> None:
        """Define ``group`` with hex colors, or as a link to another group."""
        ...

    # ========== EVENTS, TIMERS, SCREEN ==========

    @abstractmethod
    def on_event(
        self,
        events: Iterable[str],
        scope: Any,
        callback: Callable[[HostEvent], Any],
    ) -> Subscription:
        """Subscribe to ``events``; ``scope`` restricts them (e.g. to a buffer)."""
        ...

    @abstractmethod
    def defer_callback(self, fn: Callable[[], None], delay_ms: int) -> DeferredCall:
        ...

    @abstractmethod
    def current_screen_metrics(self) -> ScreenMetrics:
        ...

    @abstractmethod
    def notify(self, message: str, level: str = "info") -> None:
        """Transient notification channel (echo area, toast, status bar...)."""
        ...

    @abstractmethod
    def mouse_position(self) -> MousePosition:
        ...

    def display_width(self, text: str) -> int:
        """Display cells taken by ``text``. Wide East Asian characters count twice."""
        width = 0
        for ch in text:
            if unicodedata.combining(ch):
                continue
            width += 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
        return width


_host_surface: Optional[HostSurfaceABC] = None


def register_host_surface(host: Optional[HostSurfaceABC]) -> None:
    """Register the process-wide host surface (None unregisters)."""
    global _host_surface
    _host_surface = host
    logger.info(f"[HOST] Registered host surface: {type(host).__name__ if host else None}")


def get_host_surface() -> HostSurfaceABC:
    """Get the registered host surface.

    Raises:
        RuntimeError: if no host was registered with setup()/register_host_surface()
    """
    if _host_surface is None:
        raise RuntimeError("No host surface registered, call pyqt_popups.setup(host) first")
    return _host_surface
