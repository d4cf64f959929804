"""Tests for the geometry engine."""

import pytest


def _resolve(host, position, lines, **kwargs):
    from pyqt_popups.geometry import GeometryEngine, GeometryInput, RequestedConfig

    requested = RequestedConfig.from_mapping(kwargs.pop("wincfg", None))
    geo = GeometryInput(position=position, requested=requested, **kwargs)
    return GeometryEngine(host).resolve(geo, lines)


def test_top_wide_spans_screen_minus_border(host):
    """TOP_WIDE with a border is the full width minus the border."""
    from pyqt_popups.geometry import Position

    rect = _resolve(host, Position.EDITOR_TOP_WIDE, ["x"], wincfg={"border": "single"})
    assert rect.width == 118
    assert (rect.row, rect.col) == (0, 0)
    assert rect.relative == "editor"


def test_left_wide_height_respects_tab_bar(host):
    """LEFT_WIDE takes the full height, minus the tab bar twice when it is shown."""
    from pyqt_popups.geometry import Position

    rect = _resolve(host, Position.EDITOR_LEFT_WIDE, ["x"], wincfg={"border": "single"})
    assert rect.height == 38
    assert rect.row == 0

    host.tab_bar_visible = True
    rect = _resolve(host, Position.EDITOR_LEFT_WIDE, ["x"], wincfg={"border": "single"})
    assert rect.height == 36
    assert rect.row == 1


def test_editor_center(host):
    """EDITOR_CENTER centres the popup with integer division."""
    from pyqt_popups.geometry import Position

    rect = _resolve(host, Position.EDITOR_CENTER, ["hello"])
    assert (rect.width, rect.height) == (5, 1)
    assert (rect.row, rect.col) == (19, 57)


def test_editor_botright_accounts_for_border(host):
    """Bottom/right placements keep the border on screen."""
    from pyqt_popups.geometry import Position

    rect = _resolve(host, Position.EDITOR_BOTRIGHT, ["hello"], wincfg={"border": "rounded"})
    assert (rect.row, rect.col) == (37, 113)
    assert rect.border == "rounded"


def test_window_bottom_uses_anchor_window(host):
    """WIN_BOTTOM spans the anchor window and sits on its last row."""
    from pyqt_popups.geometry import Position

    rect = _resolve(host, Position.WIN_BOTTOM, ["a", "b"], anchor_window=1)
    assert rect.relative == "win"
    assert rect.win == 1
    assert rect.width == 120
    assert (rect.row, rect.col) == (39 - 2, 0)


def test_at_cursor(host):
    """AT_CURSOR is one cell below and right of the cursor."""
    from pyqt_popups.geometry import Position

    rect = _resolve(host, Position.AT_CURSOR, ["hi"])
    assert rect.relative == "cursor"
    assert (rect.row, rect.col) == (1, 1)
    assert rect.win is None


def test_width_limit(host):
    """Content width is capped at max(textwidth, 79) unless the limit is off."""
    from pyqt_popups.geometry import Position

    long_line = "x" * 100
    assert _resolve(host, Position.EDITOR_CENTER, [long_line], wrap=False).width == 79
    assert _resolve(host, Position.EDITOR_CENTER, [long_line], wrap=False, limit_width=False).width == 100

    buf = host.create_buffer([long_line])
    host.set_buffer_option(buf, "textwidth", 90)
    assert _resolve(host, Position.EDITOR_CENTER, [long_line], wrap=False, buffer=buf).width == 90


def test_wrapped_height_with_showbreak(host):
    """A 45-cell line in a 20-cell window with a 2-cell showbreak takes 3 rows."""
    from pyqt_popups.geometry import Position

    host.showbreak = "> "
    rect = _resolve(host, Position.CUSTOM, ["y" * 45], wincfg={"width": 20})
    assert rect.width == 20
    assert rect.height == 3

    rect = _resolve(host, Position.CUSTOM, ["y" * 45], wincfg={"width": 20}, wrap=False)
    assert rect.height == 1


def test_wrapped_rows():
    """Extra rows for soft-wrapped lines."""
    from pyqt_popups.geometry import wrapped_rows

    assert wrapped_rows(45, 20, 2) == 2
    assert wrapped_rows(20, 20, 0) == 0
    assert wrapped_rows(50, 2, 2) == 0
    assert wrapped_rows(41, 20, 0) == 2


def test_wide_characters_count_double(host):
    """East Asian wide characters take two cells."""
    from pyqt_popups.geometry import Position

    assert host.display_width("日本") == 4
    assert _resolve(host, Position.EDITOR_CENTER, ["日本"]).width == 4


def test_empty_content_has_minimum_size(host):
    """Empty content still yields a 1x1 rectangle."""
    from pyqt_popups.geometry import Position

    rect = _resolve(host, Position.EDITOR_CENTER, [])
    assert (rect.width, rect.height) == (1, 1)


def test_resolve_is_idempotent(host):
    """Resolving the same input twice gives the same rectangle."""
    from pyqt_popups.geometry import Position

    for position in Position:
        first = _resolve(host, position, ["one", "two three"], anchor_window=1)
        second = _resolve(host, position, ["one", "two three"], anchor_window=1)
        assert first == second


def test_custom_clamps_requested_origin(host):
    """CUSTOM keeps the rectangle on screen."""
    from pyqt_popups.geometry import Position

    rect = _resolve(
        host, Position.CUSTOM, ["x"],
        wincfg={"row": 100, "col": 500, "width": 10, "height": 5},
    )
    assert (rect.row, rect.col) == (35, 110)

    rect = _resolve(host, Position.CUSTOM, ["x"], wincfg={"row": -4, "col": -1})
    assert (rect.row, rect.col) == (0, 0)


def test_custom_prefers_live_rectangle(host):
    """A visible CUSTOM popup keeps its live position over the last request."""
    from pyqt_popups.geometry import Position, Rectangle

    buf = host.create_buffer(["x"])
    win = host.open_window(buf, False, Rectangle(relative="editor", width=3, height=1, row=5, col=7))

    rect = _resolve(host, Position.CUSTOM, ["x"], window=win, wincfg={"row": 1, "col": 1})
    assert (rect.row, rect.col) == (5, 7)

    host.close_window(win)
    rect = _resolve(host, Position.CUSTOM, ["x"], window=win, wincfg={"row": 1, "col": 1})
    assert (rect.row, rect.col) == (1, 1)


def test_position_coerce():
    """Positions accept names, values and members."""
    from pyqt_popups.geometry import Position

    assert Position.coerce("editor_center") is Position.EDITOR_CENTER
    assert Position.coerce(13) is Position.EDITOR_TOPRIGHT
    assert Position.coerce(Position.CUSTOM) is Position.CUSTOM
    with pytest.raises(ValueError):
        Position.coerce("middle")


def test_requested_config_rejects_unknown_keys():
    """Unknown window config keys are programmer errors."""
    from pyqt_popups.geometry import RequestedConfig

    with pytest.raises(ValueError):
        RequestedConfig.from_mapping({"rows": 3})


def test_requested_config_copy_keeps_style_only():
    """Copies keep style keys, and placement only when asked to."""
    from pyqt_popups.geometry import RequestedConfig

    config = RequestedConfig(border="single", width=10, row=3, relative="win")
    style_only = config.for_copy(keep_placement=False)
    assert style_only.border == "single"
    assert style_only.width is None and style_only.relative is None

    placed = config.for_copy(keep_placement=True)
    assert (placed.width, placed.row) == (10, 3)
