"""Symbolic popup positions."""

from enum import Enum
from typing import Union


class Position(Enum):
    """
    Placement rule resolved to concrete coordinates at render time.

    Values are ordered: every value at or above
    EDITOR_CENTER is positioned relative to the whole editor screen.
    """
    CUSTOM = -1
    AT_CURSOR = 0
    WIN_TOP = 1
    WIN_BOTTOM = 2
    EDITOR_CENTER = 3
    EDITOR_CENTER_LEFT = 4
    EDITOR_CENTER_RIGHT = 5
    EDITOR_CENTER_TOP = 6
    EDITOR_CENTER_BOTTOM = 7
    EDITOR_LEFT_WIDE = 8
    EDITOR_RIGHT_WIDE = 9
    EDITOR_TOP_WIDE = 10
    EDITOR_BOTTOM_WIDE = 11
    EDITOR_TOPLEFT = 12
    EDITOR_TOPRIGHT = 13
    EDITOR_BOTLEFT = 14
    EDITOR_BOTRIGHT = 15

    @property
    def is_editor(self) -> bool:
        return self.value >= Position.EDITOR_CENTER.value

    @property
    def is_window(self) -> bool:
        return self in (Position.WIN_TOP, Position.WIN_BOTTOM)

    @property
    def is_wide_horizontal(self) -> bool:
        """Spans the whole screen width."""
        return self in (Position.EDITOR_TOP_WIDE, Position.EDITOR_BOTTOM_WIDE)

    @property
    def is_wide_vertical(self) -> bool:
        """Spans the whole screen height."""
        return self in (Position.EDITOR_LEFT_WIDE, Position.EDITOR_RIGHT_WIDE)

    @classmethod
    def coerce(cls, value: Union["Position", str, int]) -> "Position":
        """Accept a Position, its name (case-insensitive) or its numeric value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown popup position: {value!r}") from None
        return cls(value)
