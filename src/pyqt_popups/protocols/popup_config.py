"""Library-wide popup configuration.

Applications can replace the defaults with set_popup_config().
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class PopupConfig:
    """Defaults shared by every popup.

    Attributes:
        min_text_width: Content width is capped at max(textwidth, min_text_width)
        notification_seconds: How long notification() keeps a popup visible
        default_namespace: Registry namespace for popups that don't name one
        default_hide_on: Host events hiding a popup that neither enters nor follows
        theme_change_event: Host event signalling a colorscheme change
    """

    min_text_width: int = 79
    notification_seconds: float = 3.0
    default_namespace: str = "_G"
    default_hide_on: Tuple[str, ...] = field(
        default_factory=lambda: ("CursorMoved", "CursorMovedI", "BufLeave")
    )
    theme_change_event: str = "ColorScheme"


# Global config instance (set by application)
_popup_config: Optional[PopupConfig] = None


def set_popup_config(config: Optional[PopupConfig]) -> None:
    """Set the global popup configuration (None restores defaults)."""
    global _popup_config
    _popup_config = config


def get_popup_config() -> PopupConfig:
    """Get the current popup configuration, or defaults if not set."""
    if _popup_config is None:
        return PopupConfig()
    return _popup_config
