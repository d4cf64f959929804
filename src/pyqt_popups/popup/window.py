"""Opening and updating the popup window on the host."""

import logging
from dataclasses import replace
from typing import Any, Dict, TYPE_CHECKING

from pyqt_popups.core.merge_utils import merge_overwrite
from pyqt_popups.geometry.engine import GeometryInput, clamp
from pyqt_popups.geometry.rectangle import Rectangle

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup
    from pyqt_popups.popup.options import PopupOptions

logger = logging.getLogger(__name__)


def effective_winopts(options: "PopupOptions") -> Dict[str, Any]:
    style = options.wincfg.style
    return merge_overwrite(
        {"cursorline": style not in (None, "minimal"), "wrap": True},
        options.winopts,
    )


def geometry_input(popup: "Popup") -> GeometryInput:
    options, state = popup.options, popup.state
    focusable = options.wincfg.focusable
    if focusable is None:
        focusable = options.focusable
    return GeometryInput(
        position=options.pos,
        requested=options.wincfg,
        anchor_window=state.prevwin,
        window=state.win,
        buffer=state.buf,
        wrap=bool(effective_winopts(options).get("wrap", True)),
        limit_width=options.limit_width,
        focusable=bool(options.enter or options.drag or focusable),
    )


def resolve_rectangle(popup: "Popup") -> Rectangle:
    """Compute the popup rectangle from its content and remember it."""
    lines = popup.host.get_buffer_lines(popup.state.buf)
    rect = popup.geometry.resolve(geometry_input(popup), lines)
    popup.state.resolved = rect
    return rect


def update_window(popup: "Popup") -> None:
    """Reconfigure a visible popup in place, swapping in a pending buffer."""
    host, state = popup.host, popup.state
    if state.pending_buf is not None:
        host.set_window_buffer(state.win, state.pending_buf)
        state.buf = state.pending_buf
        state.pending_buf = None
    host.reconfigure_window(state.win, resolve_rectangle(popup))
    host.set_window_cursor(state.win, 1, 0)


def open_popup_window(popup: "Popup") -> int:
    """Open the popup window, or update it when it is already visible.

    Returns:
        The popup window handle
    """
    host, state, options = popup.host, popup.state, popup.options
    winopts = effective_winopts(options)

    if popup.is_visible():
        update_window(popup)
    else:
        state.pending_buf = None
        rect = resolve_rectangle(popup)
        state.win = host.open_window(state.buf, bool(options.enter and options.bfn is None), rect)
        if "winblend" in winopts:
            state.blend_level = clamp(int(winopts["winblend"]), 0, 100)
        logger.debug(f"[WINDOW] Opened window {state.win} for popup {state.id} at {rect.row},{rect.col}")

    for name, value in winopts.items():
        host.set_window_option(state.win, name, value)
    if not options.gutter:
        host.set_window_option(state.win, "number", False)
        host.set_window_option(state.win, "signcolumn", "no")
    return state.win


def apply_live_rectangle(popup: "Popup", rect: Rectangle) -> None:
    """Move/resize the visible window directly and mirror it into the requested config."""
    popup.host.reconfigure_window(popup.state.win, rect)
    popup.state.resolved = rect
    wincfg = replace(popup.options.wincfg, row=rect.row, col=rect.col, width=rect.width, height=rect.height)
    popup.replace_options(wincfg=wincfg)
