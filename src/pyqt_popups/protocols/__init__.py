"""
Host protocols and configuration.

ABC-based contract for the host surface, plus the global popup
configuration hooks.
"""

from .host_surface import (
    HostSurfaceABC,
    BufferHandle,
    WindowHandle,
    ScreenMetrics,
    WindowMetrics,
    HighlightDefinition,
    MousePosition,
    HostEvent,
    Subscription,
    register_host_surface,
    get_host_surface,
)
from .popup_config import PopupConfig, set_popup_config, get_popup_config

__all__ = [
    "HostSurfaceABC",
    "BufferHandle",
    "WindowHandle",
    "ScreenMetrics",
    "WindowMetrics",
    "HighlightDefinition",
    "MousePosition",
    "HostEvent",
    "Subscription",
    "register_host_surface",
    "get_host_surface",
    "PopupConfig",
    "set_popup_config",
    "get_popup_config",
]
