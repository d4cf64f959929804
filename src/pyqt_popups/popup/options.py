"""Popup options.

Options are frozen: configure() builds a new PopupOptions through the pure
merge helpers, so arguments captured by queued operations never change.

--------------------------------------------------------------------------------
    KEY          DEFAULT          NOTES
--------------------------------------------------------------------------------
    pos          AT_CURSOR        Position, its name, or its numeric value
    namespace    "_G"             registry namespace
    enter        False            enter popup window after creation
    follow       False            follow the cursor (AT_CURSOR only)
    focusable    True
    focus        False
    autoresize   True             redraw when the popup buffer changes
    noqueue      False            run operations immediately, no chaining
    drag         False            mouse drag/resize and arrow-key moves
    gutter       False            keep number/sign columns
    limit_width  True             cap content width at max(textwidth, 79)
    theme        "default"        popup appearance
    lines        None             content for a scratch buffer
    buf          None             existing buffer handle
    bfn          None             callable(popup) -> buffer | lines | (lines, bufopts)
    bufbind      None             buffer whose cursor a following popup tracks
    bufopts      {}               buffer options
    winopts      {}               window options
    wincfg       {}               RequestedConfig overrides
    hide_on      None             events that hide the popup
    on_show      None             callable(popup), after the popup is shown
    on_hide      None             callable(popup), truthy result vetoes hiding
    on_dispose   None             callable(popup), truthy result vetoes destroy
    prevwin      None             anchor window (current window if invalid)
--------------------------------------------------------------------------------
"""

from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from pyqt_popups.core.merge_utils import merge_overwrite
from pyqt_popups.geometry.positions import Position
from pyqt_popups.geometry.rectangle import RequestedConfig
from pyqt_popups.protocols.popup_config import get_popup_config

PopupCallback = Callable[[Any], Any]


def split_lines(lines: Union[str, Sequence[str], None]) -> Tuple[str, ...]:
    """Lines from a sequence, or from a string split on newlines (outer empty lines dropped)."""
    if lines is None:
        return ()
    if isinstance(lines, str):
        parts = lines.split("\n")
        while parts and parts[0] == "":
            parts.pop(0)
        while parts and parts[-1] == "":
            parts.pop()
        return tuple(parts)
    return tuple(str(line) for line in lines)


@dataclass(frozen=True)
class PopupOptions:
    """Everything a caller can set on a popup."""

    pos: Position = Position.AT_CURSOR
    namespace: str = ""
    enter: bool = False
    follow: bool = False
    focusable: bool = True
    focus: bool = False
    autoresize: bool = True
    noqueue: bool = False
    drag: bool = False
    gutter: bool = False
    limit_width: bool = True
    theme: str = "default"
    lines: Optional[Tuple[str, ...]] = None
    buf: Optional[int] = None
    bfn: Optional[Callable[[Any], Any]] = None
    bufbind: Optional[int] = None
    bufopts: Mapping[str, Any] = field(default_factory=dict)
    winopts: Mapping[str, Any] = field(default_factory=dict)
    wincfg: RequestedConfig = field(default_factory=RequestedConfig)
    hide_on: Optional[Tuple[str, ...]] = None
    on_show: Optional[PopupCallback] = None
    on_hide: Optional[PopupCallback] = None
    on_dispose: Optional[PopupCallback] = None
    prevwin: Optional[int] = None

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def normalize_patch(cls, patch: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Validate and coerce a partial options mapping.

        Raises:
            ValueError: for unknown keys, positions or window config keys
        """
        patch = dict(patch or {})
        unknown = set(patch) - set(cls.field_names())
        if unknown:
            raise ValueError(f"Unknown popup options: {sorted(unknown)}")
        if "pos" in patch and patch["pos"] is not None:
            patch["pos"] = Position.coerce(patch["pos"])
        if "wincfg" in patch and not isinstance(patch["wincfg"], RequestedConfig):
            # validate keys now, keep explicit None values for merging later
            RequestedConfig.from_mapping(patch["wincfg"])
            patch["wincfg"] = MappingProxyType(dict(patch["wincfg"] or {}))
        if "lines" in patch and patch["lines"] is not None:
            patch["lines"] = split_lines(patch["lines"])
        if "hide_on" in patch and patch["hide_on"] is not None:
            patch["hide_on"] = tuple(patch["hide_on"])
        for key in ("bufopts", "winopts"):
            if key in patch:
                patch[key] = MappingProxyType(dict(patch[key] or {}))
        return patch

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]] = None) -> "PopupOptions":
        values = cls.normalize_patch(mapping)
        if "wincfg" in values:
            values["wincfg"] = RequestedConfig.from_mapping(values["wincfg"])
        values = {k: v for k, v in values.items() if v is not None or k in _NULLABLE}
        return cls(**values)._normalized()

    def _normalized(self) -> "PopupOptions":
        pos = self.pos if self.pos is not None else Position.AT_CURSOR
        focusable = bool(self.focus or self.focusable)
        return replace(
            self,
            pos=pos,
            namespace=self.namespace or get_popup_config().default_namespace,
            follow=bool(self.follow and pos is Position.AT_CURSOR),
            focusable=focusable,
            focus=bool(self.enter or (focusable and self.focus)),
        )

    def to_mapping(self) -> Dict[str, Any]:
        """Shallow mapping of every option."""
        return {name: getattr(self, name) for name in self.field_names()}

    def updated(self, patch: Optional[Mapping[str, Any]]) -> "PopupOptions":
        """New options with ``patch`` written over these ones."""
        patch = self.normalize_patch(patch)
        if "wincfg" in patch:
            patch["wincfg"] = self.wincfg.merged(patch["wincfg"])
        return PopupOptions.from_mapping(merge_overwrite(self.to_mapping(), patch))



# options whose None value is meaningful and must survive from_mapping()
_NULLABLE = frozenset(
    {"lines", "buf", "bfn", "bufbind", "hide_on", "on_show", "on_hide", "on_dispose", "prevwin"}
)
