"""Runtime state of a popup."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from pyqt_popups.geometry.rectangle import Rectangle
from pyqt_popups.popup.options import PopupOptions

if TYPE_CHECKING:
    from pyqt_popups.scheduling.scheduler import Scheduler


@dataclass
class PopupState:
    """Mutable part of a popup: handles, last resolved geometry and blend level."""

    options: PopupOptions
    id: int = 0
    prevwin: Optional[int] = None
    buf: Optional[int] = None
    win: Optional[int] = None
    scratch_buf: Optional[int] = None  # created by the popup, deleted on destroy
    pending_buf: Optional[int] = None  # swapped into the window on next update
    resolved: Optional[Rectangle] = None
    blend_level: int = 0  # set by blend() or winopts, applied on every show
    live_blend: int = 0  # winblend currently on the window, moved by fades
    scheduler: Optional["Scheduler"] = None
    destroyed: bool = False

    @property
    def position(self):
        return self.options.pos

    @property
    def requested(self):
        return self.options.wincfg
