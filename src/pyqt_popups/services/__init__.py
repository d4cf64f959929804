"""
Popup services: the global registry and host-event bindings.
"""

from .popup_registry import PopupRegistry
from .event_bindings import EventBindings, default_hide_on

__all__ = [
    "PopupRegistry",
    "EventBindings",
    "default_hide_on",
]
