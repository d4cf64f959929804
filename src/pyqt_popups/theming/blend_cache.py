"""Process-wide cache of resolved highlight colors and blended colors.

Both levels are filled lazily and dropped wholesale on theme change; entries
are never evicted one by one.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from pyqt_popups.theming.color_math import RGB, blend_luminosity, int_to_hex, rgb_from_int, rgb_to_hex

if TYPE_CHECKING:
    from pyqt_popups.protocols.host_surface import HostSurfaceABC

logger = logging.getLogger(__name__)

NORMAL_GROUP = "Normal"

# Used only when the host reports no color at all for Normal
FALLBACK_FOREGROUND = 0xFFFFFF
FALLBACK_BACKGROUND = 0x000000


@dataclass(frozen=True)
class ResolvedHighlight:
    """Highlight group colors with every channel filled in."""

    foreground: int
    background: int

    @property
    def foreground_rgb(self) -> RGB:
        return rgb_from_int(self.foreground)

    @property
    def background_rgb(self) -> RGB:
        return rgb_from_int(self.background)

    @property
    def foreground_hex(self) -> str:
        return int_to_hex(self.foreground)

    @property
    def background_hex(self) -> str:
        return int_to_hex(self.background)


class BlendCache:
    """Singleton cache for group colors and blend results."""

    _instance: Optional["BlendCache"] = None

    @classmethod
    def instance(cls) -> "BlendCache":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    def __init__(self, host: Optional["HostSurfaceABC"] = None):
        self._host = host
        self._groups: Dict[str, ResolvedHighlight] = {}
        self._blends: Dict[Tuple[int, int, int], str] = {}

    @property
    def host(self) -> "HostSurfaceABC":
        if self._host is not None:
            return self._host
        from pyqt_popups.protocols.host_surface import get_host_surface
        return get_host_surface()

    @property
    def group_count(self) -> int:
        return len(self._groups)

    @property
    def blend_count(self) -> int:
        return len(self._blends)

    def resolve(self, group: str) -> ResolvedHighlight:
        """Colors of ``group``, falling back to Normal for undefined channels."""
        cached = self._groups.get(group)
        if cached is not None:
            return cached
        normal = self._resolve_normal()
        if group == NORMAL_GROUP:
            return normal
        definition = self.host.resolve_highlight(group)
        if definition.foreground is None and definition.background is None:
            resolved = normal
        else:
            resolved = ResolvedHighlight(
                foreground=definition.foreground if definition.foreground is not None else normal.foreground,
                background=definition.background if definition.background is not None else normal.background,
            )
        self._groups[group] = resolved
        logger.debug(f"[BLEND] Cached highlight {group}: {resolved.foreground_hex}/{resolved.background_hex}")
        return resolved

    def _resolve_normal(self) -> ResolvedHighlight:
        cached = self._groups.get(NORMAL_GROUP)
        if cached is not None:
            return cached
        definition = self.host.resolve_highlight(NORMAL_GROUP)
        normal = ResolvedHighlight(
            foreground=definition.foreground if definition.foreground is not None else FALLBACK_FOREGROUND,
            background=definition.background if definition.background is not None else FALLBACK_BACKGROUND,
        )
        self._groups[NORMAL_GROUP] = normal
        return normal

    def blend_toward(self, alpha: int, source_group: str, dest_group: str, use_foreground: bool) -> str:
        """Hex color of ``source_group`` blended toward ``dest_group``'s background.

        Args:
            alpha: Transparency level 0-100 (0 keeps the source color)
            source_group: Group whose color is changed
            dest_group: Group whose background is the target
            use_foreground: Blend the source foreground instead of its background
        """
        alpha = max(0, min(int(alpha), 100))
        source = self.resolve(source_group)
        dest = self.resolve(dest_group)
        src_value = source.foreground if use_foreground else source.background
        dst_value = dest.background
        key = (src_value, dst_value, alpha)
        cached = self._blends.get(key)
        if cached is not None:
            return cached
        if src_value == dst_value:
            result = dest.background_hex
        else:
            result = rgb_to_hex(blend_luminosity(rgb_from_int(src_value), dest.background_rgb, alpha))
        self._blends[key] = result
        return result

    def invalidate(self) -> None:
        """Drop every cached group and blend result."""
        logger.debug(f"[BLEND] Invalidating {len(self._groups)} groups, {len(self._blends)} blends")
        self._groups.clear()
        self._blends.clear()


def blend_toward(alpha: int, source_group: str, dest_group: str, use_foreground: bool) -> str:
    """Module-level shortcut for BlendCache.instance().blend_toward()."""
    return BlendCache.instance().blend_toward(alpha, source_group, dest_group, use_foreground)
