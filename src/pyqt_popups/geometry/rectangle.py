"""Resolved popup geometry."""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

# Any border other than "none" takes one cell on each side.
BORDER_THICKNESS = 2


def border_width(border: Optional[str]) -> int:
    """Rows/columns of outer space consumed by ``border`` (sum of both sides)."""
    return BORDER_THICKNESS if (border or "none") != "none" else 0


@dataclass(frozen=True)
class Rectangle:
    """Concrete window configuration handed to the host."""

    relative: str = "editor"  # "editor", "win" or "cursor"
    anchor: str = "NW"
    width: int = 1
    height: int = 1
    row: int = 0
    col: int = 0
    border: str = "none"
    focusable: bool = True
    zindex: Optional[int] = None
    style: Optional[str] = "minimal"
    win: Optional[int] = None
    bufpos: Optional[Tuple[int, int]] = None
    noautocmd: Optional[bool] = None

    @property
    def border_width(self) -> int:
        return border_width(self.border)

    @property
    def outer_width(self) -> int:
        return self.width + self.border_width

    @property
    def outer_height(self) -> int:
        return self.height + self.border_width

    def moved_to(self, row: int, col: int) -> "Rectangle":
        return replace(self, row=row, col=col)


_REQUESTED_FIELDS = (
    "relative", "anchor", "width", "height", "row", "col", "border",
    "focusable", "zindex", "style", "bufpos", "noautocmd",
)

# Keys that stay meaningful when a popup is copied to another position.
_STYLE_FIELDS = ("anchor", "focusable", "style", "border", "noautocmd")
_PLACEMENT_FIELDS = ("width", "height", "row", "col")


@dataclass(frozen=True)
class RequestedConfig:
    """User-supplied partial rectangle/style overrides (``wincfg``).

    row/col are only taken verbatim in CUSTOM mode; width/height given here
    short-circuit the content-based size computation.
    """

    relative: Optional[str] = None
    anchor: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    row: Optional[int] = None
    col: Optional[int] = None
    border: Optional[str] = None
    focusable: Optional[bool] = None
    zindex: Optional[int] = None
    style: Optional[str] = None
    bufpos: Optional[Tuple[int, int]] = None
    noautocmd: Optional[bool] = None

    @classmethod
    def from_mapping(cls, value) -> "RequestedConfig":
        """Build from a mapping, a RequestedConfig or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        unknown = set(value) - set(_REQUESTED_FIELDS)
        if unknown:
            raise ValueError(f"Unknown window config keys: {sorted(unknown)}")
        return cls(**dict(value))

    def to_mapping(self) -> dict:
        return {name: getattr(self, name) for name in _REQUESTED_FIELDS}

    def merged(self, patch) -> "RequestedConfig":
        """New config with every key present in ``patch`` overwritten."""
        if patch is None:
            return self
        if isinstance(patch, RequestedConfig):
            patch = {k: v for k, v in patch.to_mapping().items() if v is not None}
        return RequestedConfig.from_mapping({**self.to_mapping(), **dict(patch)})

    def without_size(self) -> "RequestedConfig":
        return replace(self, width=None, height=None)

    def for_copy(self, keep_placement: bool) -> "RequestedConfig":
        """Only the values that stay valid for a popup at a different position."""
        names = _STYLE_FIELDS + (_PLACEMENT_FIELDS if keep_placement else ())
        return RequestedConfig(**{name: getattr(self, name) for name in names})
