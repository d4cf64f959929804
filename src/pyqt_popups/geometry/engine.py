"""Window rectangle computation for popups.

Every function here is a pure function of its inputs and the host's current
metrics: resolving the same input twice yields the same rectangle.

Position table (rows/cols are screen size, bw the border width, min the row
reserved for a visible tab bar):

    AT_CURSOR               row 1, col 1 (relative to the cursor)
    WIN_TOP / WIN_BOTTOM    top/bottom of the anchor window, full window width
    EDITOR_*                corners, edges and centre of the screen
    EDITOR_*_WIDE           full-width or full-height bars
    CUSTOM                  live rectangle if visible, else last request, clamped
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Tuple, TYPE_CHECKING

from pyqt_popups.geometry.positions import Position
from pyqt_popups.geometry.rectangle import Rectangle, RequestedConfig, border_width
from pyqt_popups.protocols.popup_config import get_popup_config

if TYPE_CHECKING:
    from pyqt_popups.protocols.host_surface import HostSurfaceABC, ScreenMetrics, WindowMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeometryInput:
    """Snapshot of the popup state the engine reads."""

    position: Position
    requested: RequestedConfig = field(default_factory=RequestedConfig)
    anchor_window: Optional[int] = None
    window: Optional[int] = None
    buffer: Optional[int] = None
    wrap: bool = True
    limit_width: bool = True
    focusable: bool = True


def tabline_rows(metrics: "ScreenMetrics") -> int:
    """Rows kept free at the top for the tab bar."""
    return 1 if metrics.tab_bar_visible else 0


@dataclass(frozen=True)
class _Frame:
    rows: int
    cols: int
    top: int
    bw: int
    win_height: int


PlacementRule = Callable[[_Frame, int], int]

# Declarative mapping: position -> row formula (frame, popup height)
ROW_RULES: Dict[Position, PlacementRule] = {
    Position.AT_CURSOR: lambda f, h: 1,
    Position.WIN_TOP: lambda f, h: 0,
    Position.WIN_BOTTOM: lambda f, h: f.win_height - h - f.bw,
    Position.EDITOR_CENTER: lambda f, h: (f.rows - h - f.bw) // 2,
    Position.EDITOR_CENTER_LEFT: lambda f, h: (f.rows - h - f.bw) // 2,
    Position.EDITOR_CENTER_RIGHT: lambda f, h: (f.rows - h - f.bw) // 2,
    Position.EDITOR_CENTER_TOP: lambda f, h: f.top,
    Position.EDITOR_CENTER_BOTTOM: lambda f, h: f.rows - h - f.bw,
    Position.EDITOR_LEFT_WIDE: lambda f, h: f.top,
    Position.EDITOR_RIGHT_WIDE: lambda f, h: f.top,
    Position.EDITOR_TOP_WIDE: lambda f, h: f.top,
    Position.EDITOR_BOTTOM_WIDE: lambda f, h: f.rows - h - f.bw,
    Position.EDITOR_TOPLEFT: lambda f, h: f.top,
    Position.EDITOR_TOPRIGHT: lambda f, h: f.top,
    Position.EDITOR_BOTLEFT: lambda f, h: f.rows - h - f.bw,
    Position.EDITOR_BOTRIGHT: lambda f, h: f.rows - h - f.bw,
}

# Declarative mapping: position -> column formula (frame, popup width)
COLUMN_RULES: Dict[Position, PlacementRule] = {
    Position.AT_CURSOR: lambda f, w: 1,
    Position.WIN_TOP: lambda f, w: 0,
    Position.WIN_BOTTOM: lambda f, w: 0,
    Position.EDITOR_CENTER: lambda f, w: (f.cols - w - f.bw) // 2,
    Position.EDITOR_CENTER_LEFT: lambda f, w: 0,
    Position.EDITOR_CENTER_RIGHT: lambda f, w: f.cols - w - f.bw,
    Position.EDITOR_CENTER_TOP: lambda f, w: (f.cols - w - f.bw) // 2,
    Position.EDITOR_CENTER_BOTTOM: lambda f, w: (f.cols - w - f.bw) // 2,
    Position.EDITOR_LEFT_WIDE: lambda f, w: 0,
    Position.EDITOR_RIGHT_WIDE: lambda f, w: f.cols - w - f.bw,
    Position.EDITOR_TOP_WIDE: lambda f, w: 0,
    Position.EDITOR_BOTTOM_WIDE: lambda f, w: 0,
    Position.EDITOR_TOPLEFT: lambda f, w: 0,
    Position.EDITOR_TOPRIGHT: lambda f, w: f.cols - w - f.bw,
    Position.EDITOR_BOTLEFT: lambda f, w: 0,
    Position.EDITOR_BOTRIGHT: lambda f, w: f.cols - w - f.bw,
}


def clamp(value: int, low: int, high: int) -> int:
    """Clamp to [low, high]; low wins when the range is empty."""
    return max(low, min(value, high))


class GeometryEngine:
    """Computes popup rectangles from a GeometryInput and host metrics."""

    def __init__(self, host: "HostSurfaceABC"):
        self._host = host

    def resolve(self, geo: GeometryInput, lines: Sequence[str]) -> Rectangle:
        """Resolve ``geo`` against ``lines`` into a concrete Rectangle."""
        metrics = self._host.current_screen_metrics()
        requested = geo.requested
        bw = border_width(requested.border)
        anchor = self.anchor_window(geo.anchor_window)
        win_metrics = self._host.get_window_metrics(anchor)

        width, height = self.dimensions(geo, lines, metrics, win_metrics)

        if geo.position is Position.CUSTOM:
            relative = requested.relative or "editor"
            row, col = self.custom_origin(geo, metrics, width, height)
        else:
            if geo.position is Position.AT_CURSOR:
                relative = "cursor"
            elif geo.position.is_editor:
                relative = "editor"
            else:
                relative = "win"
            frame = _Frame(
                rows=metrics.rows,
                cols=metrics.cols,
                top=tabline_rows(metrics),
                bw=bw,
                win_height=win_metrics.height,
            )
            row = ROW_RULES[geo.position](frame, height)
            col = COLUMN_RULES[geo.position](frame, width)

        rect = Rectangle(
            relative=relative,
            anchor=requested.anchor or "NW",
            width=width,
            height=height,
            row=row,
            col=col,
            border=requested.border or "none",
            focusable=geo.focusable,
            zindex=requested.zindex,
            style=requested.style or "minimal",
            win=anchor if relative == "win" else None,
            bufpos=requested.bufpos,
            noautocmd=requested.noautocmd,
        )
        logger.debug(f"[GEOMETRY] {geo.position.name} -> {rect}")
        return rect

    def anchor_window(self, win: Optional[int]) -> int:
        """The anchor window, or the current window if it was closed."""
        if win is not None and self._host.is_window_valid(win):
            return win
        return self._host.current_window()

    # ========== SIZE ==========

    def dimensions(
        self,
        geo: GeometryInput,
        lines: Sequence[str],
        metrics: "ScreenMetrics",
        win_metrics: "WindowMetrics",
    ) -> Tuple[int, int]:
        """Width first, the height computation needs it."""
        requested = geo.requested
        if geo.position is Position.CUSTOM:
            width = requested.width or self.content_width(geo, lines, metrics)
            height = requested.height or self.content_height(geo, lines, width, metrics)
            return width, height
        if geo.position.is_window:
            width = max(1, win_metrics.width - border_width(requested.border))
        else:
            width = self.content_width(geo, lines, metrics)
        return width, self.content_height(geo, lines, width, metrics)

    def content_width(self, geo: GeometryInput, lines: Sequence[str], metrics: "ScreenMetrics") -> int:
        if geo.position.is_wide_horizontal:
            return max(1, metrics.cols - border_width(geo.requested.border))
        width = max([1] + [self._host.display_width(line) for line in lines])
        if geo.limit_width:
            width = min(width, max(self._textwidth(geo.buffer), get_popup_config().min_text_width))
        return width

    def content_height(
        self,
        geo: GeometryInput,
        lines: Sequence[str],
        width: int,
        metrics: "ScreenMetrics",
    ) -> int:
        if geo.position.is_wide_vertical:
            return max(1, metrics.rows - tabline_rows(metrics) * 2 - border_width(geo.requested.border))
        height = len(lines)
        if geo.wrap:
            showbreak = self._host.display_width(metrics.showbreak)
            height += sum(
                wrapped_rows(self._host.display_width(line), width, showbreak) for line in lines
            )
        return max(1, height)

    def _textwidth(self, buf: Optional[int]) -> int:
        if buf is None or not self._host.is_buffer_valid(buf):
            return 0
        return int(self._host.get_buffer_option(buf, "textwidth") or 0)

    # ========== CUSTOM ==========

    def custom_origin(self, geo: GeometryInput, metrics: "ScreenMetrics", width: int, height: int) -> Tuple[int, int]:
        """Live row/col when the window is open in the same frame, else the last request."""
        requested = geo.requested
        row, col = requested.row or 0, requested.col or 0
        if geo.window is not None and self._host.is_window_valid(geo.window):
            live = self._host.get_window_rectangle(geo.window)
            if live.relative == (requested.relative or "editor"):
                row, col = live.row, live.col
        return clamp(row, 0, metrics.rows - height), clamp(col, 0, metrics.cols - width)


def wrapped_rows(display_width: int, width: int, showbreak_width: int) -> int:
    """Extra screen rows a line of ``display_width`` takes when soft-wrapped."""
    if display_width <= width or width <= showbreak_width:
        return 0
    return math.ceil((display_width - width) / (width - showbreak_width))
