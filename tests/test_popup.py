"""Tests for the popup handle, its options and module functions."""

import pytest


def test_new_popup_starts_hidden(host):
    """new() prepares content and registers the popup without showing it."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["hello"])
    assert p.id > 0
    assert not p.is_visible()
    assert host.get_buffer_lines(p.buf) == ["hello"]
    assert host.get_buffer_option(p.buf, "buftype") == "nofile"
    assert pyqt_popups.get(p.id) is p


def test_show_opens_window_with_theme(host):
    """show() opens the window, applies the theme and the blend level."""
    import pyqt_popups
    from pyqt_popups.theming import BUILTIN_THEMES

    p = pyqt_popups.new(lines=["hello"], pos="EDITOR_CENTER").show()

    assert p.is_visible()
    rect = p.get_wincfg()
    assert (rect.row, rect.col, rect.width, rect.height) == (19, 57, 5, 1)
    assert host.get_window_option(p.win, "winhighlight") == BUILTIN_THEMES["default"].winhighlight
    assert host.get_window_option(p.win, "winblend") == 0
    assert host.get_window_option(p.win, "number") is False
    assert host.get_window_option(p.win, "wrap") is True


def test_string_lines_are_split(host):
    """String content is split on newlines, outer empty lines dropped."""
    import pyqt_popups

    p = pyqt_popups.new(lines="\nfirst\nsecond\n\n")
    assert host.get_buffer_lines(p.buf) == ["first", "second"]


def test_unknown_option_raises(host):
    """Unknown option keys are rejected at the call site."""
    import pyqt_popups

    with pytest.raises(ValueError):
        pyqt_popups.new(lines=["x"], colour="red")


def test_option_normalisation(host):
    """follow needs AT_CURSOR; enter implies focus; default namespace is _G."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"], pos="EDITOR_CENTER", follow=True, enter=True, focusable=False)
    assert p.options.follow is False
    assert p.options.focus is True
    assert p.options.namespace == "_G"


def test_chained_operations_run_in_order(host):
    """show().wait(1).hide(): the popup is hidden exactly one second later."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).show().wait(1).hide()
    assert p.is_visible()

    host.clock.advance(999)
    assert p.is_visible()
    host.clock.advance(1)
    assert not p.is_visible()


def test_timed_show(host):
    """show(seconds) hides the popup again after the delay."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).show(2)
    assert p.is_visible()
    host.clock.advance(2000)
    assert not p.is_visible()


def test_timed_hide(host):
    """hide(seconds) shows the popup again after the delay."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).show().hide(1)
    assert not p.is_visible()
    host.clock.advance(1000)
    assert p.is_visible()


def test_noqueue_timed_show(host):
    """Immediate popups get the same timed behaviour through a deferred callback."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"], noqueue=True)
    assert p.ops is p.immediate
    p.show(2)
    assert p.is_visible()
    assert len(p.scheduler) == 0
    host.clock.advance(2000)
    assert not p.is_visible()


def test_noqueue_wait_is_noop(host):
    """wait() does nothing in immediate mode."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"], noqueue=True).show().wait(5).hide()
    assert not p.is_visible()


def test_notification(host):
    """notification() shows top-right for the configured time."""
    import pyqt_popups
    from pyqt_popups import Position

    p = pyqt_popups.new(lines=["saved"]).notification()
    assert p.options.pos is Position.EDITOR_TOPRIGHT
    rect = p.get_wincfg()
    assert (rect.row, rect.col) == (0, 115)

    host.clock.advance(2999)
    assert p.is_visible()
    host.clock.advance(1)
    assert not p.is_visible()


def test_notification_uses_popup_config(host):
    """The default notification time comes from PopupConfig."""
    import pyqt_popups
    from pyqt_popups import PopupConfig, set_popup_config

    set_popup_config(PopupConfig(notification_seconds=0.5))
    p = pyqt_popups.new(lines=["saved"]).notification()
    host.clock.advance(500)
    assert not p.is_visible()


def test_configure_lines_reuses_scratch_buffer(host):
    """New lines go into the same scratch buffer and the window is resized."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["short"]).show()
    buf = p.buf
    p.configure(lines=["a much longer line"])

    assert p.buf == buf
    assert host.get_buffer_lines(buf) == ["a much longer line"]
    assert p.get_wincfg().width == 18


def test_configure_wincfg_only(host):
    """Window config changes on a visible popup are applied in place."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["hello"], pos="EDITOR_CENTER").show()
    win = p.win
    p.configure(wincfg={"border": "single"})

    assert p.win == win
    rect = p.get_wincfg()
    assert rect.border == "single"
    assert rect.col == 56


def test_configure_buffer_swaps_window_buffer(host):
    """configure(buf=...) swaps the buffer into the open window."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["old"]).show()
    other = pyqt_popups.make_buffer(["new content"])
    p.configure(buf=other)

    assert p.buf == other
    assert host.get_window_buffer(p.win) == other
    assert p.state.pending_buf is None


def test_configure_queued_arguments_are_frozen(host):
    """Mutating the caller's dict after queueing has no effect."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["hello"], pos="EDITOR_CENTER").show().wait(1)
    opts = {"wincfg": {"border": "single"}}
    p.configure(opts)
    opts["wincfg"]["border"] = "none"

    host.clock.advance(1000)
    assert p.get_wincfg().border == "single"


def test_configure_rejects_namespace_change(host):
    """Namespaces are fixed at creation; the failure is reported, not raised."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"], noqueue=True)
    p.configure(namespace="other")
    assert p.options.namespace == "_G"
    assert host.notifications[-1][0] == "error"


def test_resize_forgets_requested_size(host):
    """resize() drops the requested width of a CUSTOM popup and fits the content."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["hello"], pos="CUSTOM", wincfg={"width": 30}).show()
    assert p.get_wincfg().width == 30

    p.resize()
    assert p.get_wincfg().width == 5
    assert p.options.wincfg.width is None


def test_blend_clamps(host):
    """blend(v) stores clamp(v, 0, 100) and applies it to a visible window."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"])
    p.blend(150)
    assert p.state.blend_level == 100

    p.show().blend(-20)
    assert p.state.blend_level == 0
    assert host.get_window_option(p.win, "winblend") == 0

    p.blend(40)
    assert host.get_window_option(p.win, "winblend") == 40


def test_blend_on_hidden_popup_applies_at_show(host):
    """A level stored while hidden is the window blend of the next show."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).blend(35)
    assert not p.is_visible()

    p.show()
    assert host.get_window_option(p.win, "winblend") == 35
    assert p.state.live_blend == 35


def test_initial_blend_from_winopts(host):
    """winopts['winblend'] sets the initial blend level."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"], winopts={"winblend": 30}).show()
    assert p.state.blend_level == 30
    assert host.get_window_option(p.win, "winblend") == 30


def test_custom_keeps_window_in_place(host):
    """custom() switches to CUSTOM without moving the window."""
    import pyqt_popups
    from pyqt_popups import Position

    p = pyqt_popups.new(lines=["hello"], pos="EDITOR_BOTLEFT").show()
    before = p.get_wincfg()
    p.custom()

    assert p.options.pos is Position.CUSTOM
    after = p.get_wincfg()
    assert (after.row, after.col, after.width) == (before.row, before.col, before.width)
    assert (p.options.wincfg.row, p.options.wincfg.col) == (before.row, before.col)


def test_custom_on_hidden_popup_reports_error(host):
    """Operations needing a window report InvalidWindowError and the queue continues."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).custom().show()
    assert p.is_visible()
    assert host.notifications[0] == ("error", "popup: Cannot convert a popup that is not visible")


def test_destroy(host):
    """destroy() hides, unregisters and deletes the scratch buffer."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).show()
    buf = p.buf
    p.destroy()

    assert not p.is_visible()
    assert p.state.destroyed
    assert pyqt_popups.get(p.id) is None
    assert not host.is_buffer_valid(buf)


def test_destroy_keeps_caller_buffer(host):
    """Buffers passed in by the caller survive destroy()."""
    import pyqt_popups

    buf = pyqt_popups.make_buffer(["mine"])
    p = pyqt_popups.new(buf=buf).show()
    p.destroy()
    assert host.is_buffer_valid(buf)


def test_on_dispose_veto(host):
    """A truthy on_dispose result vetoes destroy."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"], on_dispose=lambda popup: True).show().destroy()
    assert p.is_visible()
    assert not p.state.destroyed


def test_on_hide_veto_and_on_show(host):
    """on_show runs after showing; a truthy on_hide keeps the popup open."""
    import pyqt_popups

    shown = []
    p = pyqt_popups.new(lines=["x"], on_show=shown.append, on_hide=lambda popup: True)
    p.show().hide()
    assert shown == [p]
    assert p.is_visible()


def test_show_after_destroy_reports_error(host):
    """A destroyed popup can't be shown again."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).destroy().show()
    assert not p.is_visible()
    assert host.notifications[-1][0] == "error"


def test_hide_now_drops_pending_operations(host):
    """hide_now() clears the queue; later operations still run."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).show().wait(1).blend(50)
    p.hide_now()
    host.clock.run_pending()

    assert not p.is_visible()
    assert p.state.blend_level == 0

    p.show()
    assert p.is_visible()


def test_bfn_content(host):
    """bfn may return lines or (lines, bufopts)."""
    import pyqt_popups

    p = pyqt_popups.new(bfn=lambda popup: ["from", "function"])
    assert host.get_buffer_lines(p.buf) == ["from", "function"]

    q = pyqt_popups.new(bfn=lambda popup: (["typed"], {"filetype": "markdown"}))
    assert host.get_buffer_option(q.buf, "filetype") == "markdown"
    assert host.get_buffer_option(q.buf, "buftype") == "nofile"


def test_unresolvable_content_raises(host):
    """No valid buffer means InvalidContentError."""
    import pyqt_popups
    from pyqt_popups import InvalidContentError

    with pytest.raises(InvalidContentError):
        pyqt_popups.new(bfn=lambda popup: None)
    with pytest.raises(InvalidContentError):
        pyqt_popups.new(buf=9999)


def test_make_buffer_scratch_opt_out(host):
    """scratch=False skips the scratch buffer options."""
    import pyqt_popups

    buf = pyqt_popups.make_buffer("a\nb", {"scratch": False, "modifiable": False})
    assert host.get_buffer_lines(buf) == ["a", "b"]
    assert host.get_buffer_option(buf, "buftype") is None
    assert host.get_buffer_option(buf, "modifiable") is False


def test_copy_keeps_style_and_content(host):
    """Copies share content and style but get their own window and position."""
    import pyqt_popups
    from pyqt_popups import Position

    original = pyqt_popups.new(lines=["hello"], wincfg={"border": "single", "width": 30}).show()
    copy = pyqt_popups.new(copy=original, pos="EDITOR_CENTER").show()

    assert copy.id != original.id
    assert copy.win != original.win
    assert copy.buf == original.buf
    assert copy.options.pos is Position.EDITOR_CENTER
    assert copy.options.wincfg.border == "single"
    assert copy.options.wincfg.width is None


def test_event_bindings_hide_on_cursor_moved(host):
    """Default hide_on events hide the popup once, one tick after showing."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"]).show()
    assert host.fire_event("CursorMoved") == 0

    host.clock.advance(0)
    host.fire_event("CursorMoved")
    assert not p.is_visible()
    # only the theme-change hook is left
    assert host.subscription_count == 1


def test_autoresize_on_text_change(host):
    """Editing the popup buffer redraws it to the new size."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"], hide_on=[]).show()
    host.clock.advance(0)
    host.set_buffer_text(p.buf, ["wider content"])
    assert p.get_wincfg().width == 13


def test_enter_after_show(host):
    """Entering popups become the current window even when opened without focus."""
    import pyqt_popups

    p = pyqt_popups.new(bfn=lambda popup: ["x"], enter=True).show()
    assert host.current_window() != p.win
    host.clock.advance(0)
    assert host.current_window() == p.win

    host.fire_event("WinLeave")
    assert not p.is_visible()


def test_debug_returns_state(host):
    """debug() returns the state or one attribute of it."""
    import pyqt_popups

    p = pyqt_popups.new(lines=["x"])
    assert p.debug() is p.state
    assert p.debug("blend_level") == 0
    assert p.debug("theme") == "default"


def test_panic_destroys_everything(host):
    """panic() destroys popups in every namespace immediately."""
    import pyqt_popups
    from pyqt_popups.services import PopupRegistry

    a = pyqt_popups.new(lines=["a"]).show().wait(10)
    b = pyqt_popups.new(lines=["b"], namespace="other").show()
    pyqt_popups.panic()

    assert not a.is_visible() and not b.is_visible()
    assert a.state.destroyed and b.state.destroyed
    assert len(PopupRegistry.instance()) == 0
