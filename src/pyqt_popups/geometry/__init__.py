"""
Geometry engine.

Translates a symbolic position plus content and screen metrics into a
concrete window rectangle.
"""

from .positions import Position
from .rectangle import Rectangle, RequestedConfig, border_width, BORDER_THICKNESS
from .engine import GeometryEngine, GeometryInput, tabline_rows, wrapped_rows, clamp

__all__ = [
    "Position",
    "Rectangle",
    "RequestedConfig",
    "border_width",
    "BORDER_THICKNESS",
    "GeometryEngine",
    "GeometryInput",
    "tabline_rows",
    "wrapped_rows",
    "clamp",
]
