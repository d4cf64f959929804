"""RGB helpers and luminosity blending.

Colors travel as 0xRRGGBB integers (what hosts report for highlight groups),
as (r, g, b) tuples for arithmetic, and as "#rrggbb" strings for hosts that
define highlights. Hex parsing and formatting go through QColor.
"""

from typing import Tuple

from PyQt6.QtGui import QColor

RGB = Tuple[int, int, int]


def rgb_from_int(value: int) -> RGB:
    """Split a 0xRRGGBB integer into its channels."""
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def rgb_to_int(rgb: RGB) -> int:
    r, g, b = rgb
    return (r << 16) | (g << 8) | b


def rgb_to_hex(rgb: RGB) -> str:
    """Format channels as "#rrggbb"."""
    return QColor(*rgb).name()


def int_to_hex(value: int) -> str:
    return rgb_to_hex(rgb_from_int(value))


def hex_to_rgb(text: str) -> RGB:
    """Parse "#rgb" / "#rrggbb" (or a named color) into channels.

    Raises:
        ValueError: if QColor cannot parse ``text``
    """
    color = QColor(text)
    if not color.isValid():
        raise ValueError(f"Invalid color: {text!r}")
    return color.red(), color.green(), color.blue()


def luminosity(rgb: RGB) -> int:
    """Average of the three channels, floored."""
    return sum(rgb) // 3


def blend_luminosity(source: RGB, destination: RGB, alpha: int) -> RGB:
    """Move every channel of ``source`` toward the luminosity of ``destination``.

    ``alpha`` is a transparency level: 0 leaves ``source`` unchanged, 100 gives
    a grey of the destination's luminosity.
    """
    target = luminosity(destination)
    return tuple(c - (c - target) * alpha // 100 for c in source)  # type: ignore[return-value]
