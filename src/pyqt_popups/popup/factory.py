"""Module-level functions: setup, popup creation and namespace management."""

import logging
from typing import Any, Mapping, Optional, Sequence, Union, TYPE_CHECKING

from pyqt_popups.core.merge_utils import merge_defaults
from pyqt_popups.geometry.positions import Position
from pyqt_popups.popup import content
from pyqt_popups.popup.handle import Popup
from pyqt_popups.popup.options import PopupOptions
from pyqt_popups.protocols.host_surface import get_host_surface, register_host_surface
from pyqt_popups.protocols.popup_config import PopupConfig, set_popup_config
from pyqt_popups.services.popup_registry import PopupRegistry
from pyqt_popups.theming.blend_cache import BlendCache
from pyqt_popups.theming.themes import ThemeManager

if TYPE_CHECKING:
    from pyqt_popups.protocols.host_surface import HostSurfaceABC

logger = logging.getLogger(__name__)


def setup(host: "HostSurfaceABC", config: Optional[PopupConfig] = None) -> None:
    """Register ``host``, reset color caches and install the theme hooks."""
    register_host_surface(host)
    if config is not None:
        set_popup_config(config)
    BlendCache.reset_instance()
    ThemeManager.reset_instance()
    ThemeManager.instance().install(host)
    logger.info(f"[POPUP] Setup complete for {type(host).__name__}")


def copy_options(source: Popup) -> dict:
    """Options of ``source`` that carry over to a copy with a fresh window."""
    options = source.options
    copied = options.to_mapping()
    copied["wincfg"] = options.wincfg.for_copy(keep_placement=options.pos is Position.CUSTOM)
    copied["buf"] = source.state.buf
    copied["lines"] = None
    copied["bfn"] = None
    return copied


def new(copy: Optional[Popup] = None, **opts: Any) -> Popup:
    """Create and register a popup. It starts hidden.

    Args:
        copy: Popup whose options fill in the ones not given here
        **opts: PopupOptions keys

    Raises:
        ValueError: for unknown options
        InvalidContentError: if no buffer can be resolved
    """
    host = get_host_surface()
    mapping = PopupOptions.normalize_patch(opts)
    if copy is not None:
        mapping = merge_defaults(mapping, copy_options(copy))
    popup = Popup(PopupOptions.from_mapping(mapping), host)
    content.prepare(popup)
    PopupRegistry.instance().register(popup)
    return popup


def make_buffer(lines: Union[str, Sequence[str]], bufopts: Optional[Mapping[str, Any]] = None) -> int:
    """Create a buffer from ``lines``; scratch options apply unless ``scratch=False``."""
    return content.create_buffer(get_host_surface(), lines, bufopts)


def get(popup_id: int) -> Optional[Popup]:
    return PopupRegistry.instance().get(popup_id)


def destroy_ns(namespace: str) -> None:
    PopupRegistry.instance().destroy_namespace(namespace)


def panic() -> None:
    """Destroy every popup in every namespace right now."""
    registry = PopupRegistry.instance()
    for namespace in registry.namespaces:
        registry.for_each_in_namespace(namespace, lambda popup: popup.destroy_now())
    registry.clear()
    logger.warning("[POPUP] Panic: all popups destroyed")
