"""Popup content: resolving and creating the buffer a popup displays."""

import logging
from typing import Any, Mapping, Optional, Sequence, Union, TYPE_CHECKING

from pyqt_popups.core.merge_utils import merge_defaults
from pyqt_popups.exceptions import InvalidContentError
from pyqt_popups.popup.options import split_lines
from pyqt_popups.popup.window import update_window

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup
    from pyqt_popups.protocols.host_surface import HostSurfaceABC

logger = logging.getLogger(__name__)

SCRATCH_OPTIONS = {"buftype": "nofile", "bufhidden": "hide", "swapfile": False}


def apply_buffer_options(host: "HostSurfaceABC", buf: int, bufopts: Optional[Mapping[str, Any]]) -> None:
    """Set ``bufopts`` on ``buf``. Scratch options fill in unless ``scratch=False``."""
    opts = dict(bufopts or {})
    if opts.pop("scratch", True):
        opts = merge_defaults(opts, SCRATCH_OPTIONS)
    for name, value in opts.items():
        host.set_buffer_option(buf, name, value)


def create_buffer(
    host: "HostSurfaceABC",
    lines: Union[str, Sequence[str], None],
    bufopts: Optional[Mapping[str, Any]] = None,
) -> int:
    buf = host.create_buffer(list(split_lines(lines)))
    apply_buffer_options(host, buf, bufopts)
    logger.debug(f"[CONTENT] Created buffer {buf}")
    return buf


def _fill_scratch(popup: "Popup", lines, bufopts: Optional[Mapping[str, Any]]) -> int:
    host, state = popup.host, popup.state
    if host.is_buffer_valid(state.scratch_buf):
        host.set_buffer_lines(state.scratch_buf, list(split_lines(lines)))
        apply_buffer_options(host, state.scratch_buf, bufopts)
        return state.scratch_buf
    state.scratch_buf = create_buffer(host, lines, bufopts)
    return state.scratch_buf


def _from_function(popup: "Popup") -> Optional[int]:
    result = popup.options.bfn(popup)
    if isinstance(result, int) and not isinstance(result, bool):
        return result
    if isinstance(result, tuple) and len(result) == 2 and isinstance(result[1], Mapping):
        return _fill_scratch(popup, result[0], result[1])
    if isinstance(result, (str, list, tuple)):
        return _fill_scratch(popup, result, popup.options.bufopts)
    return None


def prepare(popup: "Popup", update_visible: bool = True) -> int:
    """Resolve the popup's buffer and update the window if it's visible.

    Returns:
        The buffer handle the popup now displays

    Raises:
        InvalidContentError: if no valid buffer can be resolved
    """
    host, state, options = popup.host, popup.state, popup.options

    if state.pending_buf is not None:
        state.buf = state.pending_buf
    elif options.bfn is not None:
        state.buf = _from_function(popup)
    elif options.lines is not None:
        state.buf = _fill_scratch(popup, options.lines, options.bufopts)
        popup.replace_options(lines=None, buf=None)
    elif options.buf is not None:
        state.buf = options.buf
    elif not host.is_buffer_valid(state.buf):
        state.buf = _fill_scratch(popup, [], options.bufopts)

    if not host.is_buffer_valid(state.buf):
        raise InvalidContentError("Popup needs a valid buffer")

    if options.drag:
        popup.drag_controller.attach(state.buf)

    if update_visible and popup.is_visible():
        update_window(popup)
    return state.buf


def release(popup: "Popup") -> None:
    """Delete the scratch buffer created for ``popup``."""
    host, state = popup.host, popup.state
    if host.is_buffer_valid(state.scratch_buf):
        host.delete_buffer(state.scratch_buf)
        logger.debug(f"[CONTENT] Deleted scratch buffer {state.scratch_buf}")
    state.scratch_buf = None
