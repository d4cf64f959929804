"""
Theming and color blending.

RGB math, the process-wide blend cache and popup highlight themes.
"""

from .color_math import (
    RGB,
    rgb_from_int,
    rgb_to_int,
    rgb_to_hex,
    int_to_hex,
    hex_to_rgb,
    luminosity,
    blend_luminosity,
)
from .blend_cache import BlendCache, ResolvedHighlight, blend_toward
from .themes import ThemeManager, PopupTheme, THEME_LINKS, BUILTIN_THEMES, DEFAULT_THEME

__all__ = [
    "RGB",
    "rgb_from_int",
    "rgb_to_int",
    "rgb_to_hex",
    "int_to_hex",
    "hex_to_rgb",
    "luminosity",
    "blend_luminosity",
    "BlendCache",
    "ResolvedHighlight",
    "blend_toward",
    "ThemeManager",
    "PopupTheme",
    "THEME_LINKS",
    "BUILTIN_THEMES",
    "DEFAULT_THEME",
]
