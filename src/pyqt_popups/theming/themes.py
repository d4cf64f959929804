"""Popup themes.

Popups draw with their own highlight groups linked to the host's float
groups, so fades can recolor them without touching the originals. A theme is
the 'winhighlight' mapping applied to the popup window.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from pyqt_popups.protocols.popup_config import get_popup_config
from pyqt_popups.theming.blend_cache import BlendCache

if TYPE_CHECKING:
    from pyqt_popups.protocols.host_surface import HostEvent, HostSurfaceABC, Subscription

logger = logging.getLogger(__name__)

# Default highlight links
THEME_LINKS: Dict[str, str] = {
    "PopupNormal": "NormalFloat",
    "PopupBorder": "FloatBorder",
    "PopupConstant": "Constant",
    "PopupComment": "Comment",
    "PopupGutter": "LineNr",
}

DEFAULT_THEME = "default"


@dataclass(frozen=True)
class PopupTheme:
    """Named window highlight mapping."""

    name: str
    winhighlight: str
    links: Mapping[str, str] = field(default_factory=lambda: dict(THEME_LINKS))


def _winhighlight_for(links: Mapping[str, str]) -> str:
    return ",".join(f"{target}:{group}" for group, target in links.items())


BUILTIN_THEMES: Dict[str, PopupTheme] = {
    DEFAULT_THEME: PopupTheme(DEFAULT_THEME, _winhighlight_for(THEME_LINKS)),
    "error": PopupTheme("error", "NormalFloat:Error,FloatBorder:Error"),
}


class ThemeManager:
    """Singleton owning theme definitions and the theme-change hook."""

    _instance: Optional["ThemeManager"] = None

    @classmethod
    def instance(cls) -> "ThemeManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        if cls._instance is not None:
            cls._instance.uninstall()
        cls._instance = None

    def __init__(self):
        self._themes: Dict[str, PopupTheme] = dict(BUILTIN_THEMES)
        self._host: Optional["HostSurfaceABC"] = None
        self._subscription: Optional["Subscription"] = None

    def register_theme(self, theme: PopupTheme) -> None:
        self._themes[theme.name] = theme
        logger.info(f"[THEMES] Registered theme: {theme.name}")

    def get_theme(self, name: Optional[str]) -> PopupTheme:
        theme = self._themes.get(name or DEFAULT_THEME)
        if theme is None:
            logger.warning(f"[THEMES] Unknown theme {name!r}, using {DEFAULT_THEME}")
            theme = self._themes[DEFAULT_THEME]
        return theme

    def link_groups(self, host: "HostSurfaceABC", theme: Optional[PopupTheme] = None) -> None:
        """(Re)link popup groups, undoing any recoloring done by fades."""
        links = (theme or self._themes[DEFAULT_THEME]).links
        for group, target in links.items():
            host.define_highlight(group, link=target)

    def apply(self, host: "HostSurfaceABC", win: int, theme_name: Optional[str], winopts: Mapping[str, Any]) -> None:
        """Apply theme to popup window, unless the popup sets its own 'winhighlight'."""
        if "winhighlight" in winopts:
            return
        theme = self.get_theme(theme_name)
        self.link_groups(host, theme)
        host.set_window_option(win, "winhighlight", theme.winhighlight)

    def install(self, host: "HostSurfaceABC") -> None:
        """Link groups now and relink them (dropping cached colors) on theme change."""
        self.uninstall()
        self._host = host
        self.link_groups(host)
        self._subscription = host.on_event(
            [get_popup_config().theme_change_event], None, self._on_theme_changed
        )
        logger.debug("[THEMES] Installed theme-change hook")

    def uninstall(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
        self._subscription = None
        self._host = None

    def _on_theme_changed(self, event: "HostEvent") -> None:
        logger.info(f"[THEMES] Theme changed ({event.name}), resetting popup highlights")
        BlendCache.instance().invalidate()
        if self._host is not None:
            self.link_groups(self._host)
