"""Move animation driver.

Moves a visible popup by whole cells, clamped to the screen. The popup is
converted to CUSTOM first, so the moved placement survives later redraws.
Animated moves step ``cells_per_step`` cells every ``interval_ms`` while
holding the scheduler permit.
"""

import logging
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from pyqt_popups.animation.animation_config import AnimationConfig, get_animation_config
from pyqt_popups.core.error_reporting import call_reporting_errors
from pyqt_popups.exceptions import InvalidWindowError
from pyqt_popups.geometry.engine import clamp, tabline_rows
from pyqt_popups.geometry.rectangle import Rectangle
from pyqt_popups.popup.window import apply_live_rectangle

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup
    from pyqt_popups.protocols.host_surface import ScreenMetrics
    from pyqt_popups.scheduling.scheduler import InFlightToken

logger = logging.getLogger(__name__)


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]

    @classmethod
    def coerce(cls, value) -> "Direction":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown move direction: {value!r}") from None


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


def move_bounds(rect: Rectangle, metrics: "ScreenMetrics") -> Tuple[int, int, int, int]:
    """(min_row, max_row, min_col, max_col) keeping ``rect`` fully on screen."""
    bw = rect.border_width
    max_row = metrics.rows - metrics.cmdline_height - rect.height - bw
    max_col = metrics.cols - rect.width - bw
    return tabline_rows(metrics), max_row, 0, max_col


def displaced(rect: Rectangle, direction: Direction, cells: int, metrics: "ScreenMetrics") -> Rectangle:
    min_row, max_row, min_col, max_col = move_bounds(rect, metrics)
    drow, dcol = direction.delta
    row = clamp(rect.row + drow * cells, min_row, max_row)
    col = clamp(rect.col + dcol * cells, min_col, max_col)
    return rect.moved_to(row, col)


class MoveDriver:
    """Moves one popup, instantly or step by step."""

    def __init__(self, popup: "Popup", config: Optional[AnimationConfig] = None):
        self._popup = popup
        self._config = config or get_animation_config()
        self._token: Optional["InFlightToken"] = None
        self._direction = Direction.DOWN
        self._remaining = 0
        self._per_step = 1
        self._interval_ms = 0

    @property
    def token(self) -> Optional["InFlightToken"]:
        return self._token

    def start(self, direction, cells: int = 1, animated: bool = False,
              cells_per_step: Optional[int] = None, interval_ms: Optional[int] = None) -> None:
        """Move the popup ``cells`` cells toward ``direction``.

        Raises:
            InvalidWindowError: if the popup is not visible
        """
        popup = self._popup
        if not popup.is_visible():
            raise InvalidWindowError("Cannot move a popup that is not visible")
        direction = Direction.coerce(direction)
        cells = int(cells)
        popup.immediate.ensure_custom()

        if not animated or cells <= 0:
            self.step(direction, cells)
            return

        self._direction = direction
        self._remaining = cells
        self._per_step = max(1, int(cells_per_step or self._config.move_cells_per_step))
        self._interval_ms = self._config.move_interval_ms if interval_ms is None else int(interval_ms)
        self._token = popup.scheduler.acquire("move")
        logger.debug(f"[MOVE] Popup {popup.state.id}: {cells} cells {direction.value}, animated")
        popup.host.defer_callback(self._tick, self._interval_ms)

    def step(self, direction: Direction, cells: int) -> None:
        popup = self._popup
        host = popup.host
        rect = host.get_window_rectangle(popup.state.win)
        apply_live_rectangle(popup, displaced(rect, direction, cells, host.current_screen_metrics()))

    def _tick(self) -> None:
        if self._token is None or not self._token.current:
            return
        popup = self._popup
        if not popup.is_visible():
            logger.debug(f"[MOVE] Popup {popup.state.id} window went away, stopping")
            popup.run_now("hide")
            self._token.release()
            return

        cells = min(self._per_step, self._remaining)
        ok, _ = call_reporting_errors(popup.host, "move", self.step, self._direction, cells)
        self._remaining -= cells
        if not ok or self._remaining <= 0:
            self._token.release()
        else:
            popup.host.defer_callback(self._tick, self._interval_ms)
