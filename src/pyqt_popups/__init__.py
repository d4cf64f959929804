"""
pyqt-popups: queued, animated popup overlays for text-cell host surfaces.

Popups are floating windows placed by symbolic position, filled from a buffer
and driven through a chainable, per-popup operation queue.

Architecture:
- Tier 1 (Core): Qt timer adapter, manual clock, merge helpers, error boundary
- Tier 2 (Protocols): HostSurfaceABC and global configuration
- Tier 3 (Engines): geometry, color blending, scheduling, animation drivers
- Tier 4 (Popups): options, the Popup handle and the namespace registry

Key Features:
- Positions relative to cursor, window or editor, plus free CUSTOM placement
- Ordered operation queue with waits and timed show/hide
- Fade and move animations that cancel cleanly on hide/destroy
- Highlight blending with a process-wide color cache
- Mouse drag/resize for interactive popups

Example:

    import pyqt_popups
    from pyqt_popups.hosts import InMemoryHost

    pyqt_popups.setup(InMemoryHost())
    pyqt_popups.new(lines=["Build finished"]).notification().fade(1).destroy()
"""

__version__ = "0.1.0"

from pyqt_popups.exceptions import (
    PopupError,
    InvalidContentError,
    InvalidWindowError,
    OperationFailure,
)
from pyqt_popups.geometry import Position, Rectangle, RequestedConfig
from pyqt_popups.popup.factory import setup, new, make_buffer, get, destroy_ns, panic
from pyqt_popups.popup.handle import Popup
from pyqt_popups.popup.options import PopupOptions
from pyqt_popups.protocols import (
    HostSurfaceABC,
    PopupConfig,
    get_popup_config,
    set_popup_config,
)
from pyqt_popups.animation import AnimationConfig, get_animation_config, set_animation_config

__all__ = [
    "__version__",
    "PopupError",
    "InvalidContentError",
    "InvalidWindowError",
    "OperationFailure",
    "Position",
    "Rectangle",
    "RequestedConfig",
    "setup",
    "new",
    "make_buffer",
    "get",
    "destroy_ns",
    "panic",
    "Popup",
    "PopupOptions",
    "HostSurfaceABC",
    "PopupConfig",
    "get_popup_config",
    "set_popup_config",
    "AnimationConfig",
    "get_animation_config",
    "set_animation_config",
]
