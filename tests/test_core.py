"""Tests for core utilities."""

import pytest


def test_merge_overwrite_returns_new_dict():
    """merge_overwrite writes every patch key over base without mutating inputs."""
    from pyqt_popups.core import merge_overwrite

    base = {"a": 1, "b": 2}
    patch = {"b": 3, "c": None}
    merged = merge_overwrite(base, patch)

    assert merged == {"a": 1, "b": 3, "c": None}
    assert base == {"a": 1, "b": 2}
    assert merged is not base


def test_merge_defaults_fills_missing_and_none():
    """merge_defaults only fills keys that are absent or None in base."""
    from pyqt_popups.core import merge_defaults

    merged = merge_defaults({"a": 1, "b": None}, {"a": 9, "b": 2, "c": 3})
    assert merged == {"a": 1, "b": 2, "c": 3}


def test_manual_clock_runs_in_due_order():
    """Callbacks run by due time, then scheduling order, including nested ones."""
    from pyqt_popups.core import ManualClock

    clock = ManualClock()
    calls = []
    clock.call_later(lambda: calls.append("late"), 20)
    clock.call_later(lambda: calls.append("early"), 10)
    clock.call_later(lambda: clock.call_later(lambda: calls.append("nested"), 5), 10)

    assert clock.advance(15) == 3
    assert calls == ["early", "nested"]
    assert clock.now_ms == 15

    clock.advance(5)
    assert calls == ["early", "nested", "late"]
    assert clock.pending_count == 0


def test_manual_clock_cancel():
    """Cancelled calls never fire."""
    from pyqt_popups.core import ManualClock

    clock = ManualClock()
    calls = []
    call = clock.call_later(lambda: calls.append(1), 10)
    call.cancel()

    assert not call.pending
    assert clock.run_pending() == 0
    assert calls == []


def test_qt_deferrer_fires_and_cancels(qapp):
    """QtDeferrer runs callbacks from the Qt event loop and honours cancel()."""
    from PyQt6.QtTest import QTest
    from pyqt_popups.core import QtDeferrer

    deferrer = QtDeferrer()
    calls = []
    deferrer.call_later(lambda: calls.append("fired"), 0)
    cancelled = deferrer.call_later(lambda: calls.append("cancelled"), 0)
    cancelled.cancel()
    assert deferrer.pending_count == 1

    QTest.qWait(50)

    assert calls == ["fired"]
    assert deferrer.pending_count == 0


def test_qt_deferrer_cancel_all(qapp):
    """cancel_all stops every pending timer."""
    from PyQt6.QtTest import QTest
    from pyqt_popups.core import QtDeferrer

    deferrer = QtDeferrer()
    calls = []
    for _ in range(3):
        deferrer.call_later(lambda: calls.append(1), 10)
    deferrer.cancel_all()
    QTest.qWait(50)

    assert calls == []
    assert deferrer.pending_count == 0


def test_report_ui_error_notifies_host(host):
    """Errors are pushed to the host notification channel with a popup prefix."""
    from pyqt_popups.core import report_ui_error
    from pyqt_popups.exceptions import InvalidWindowError

    report_ui_error(host, InvalidWindowError("not visible"))
    assert host.notifications == [("error", "popup: not visible")]


def test_call_reporting_errors_wraps_unexpected_exceptions(host):
    """Non-popup exceptions are reported as OperationFailure and never raised."""
    from pyqt_popups.core import call_reporting_errors

    def boom():
        raise KeyError("missing")

    ok, result = call_reporting_errors(host, "redraw", boom)
    assert ok is False
    assert result is None
    level, message = host.notifications[-1]
    assert level == "error"
    assert message.startswith("popup: redraw:")


def test_call_reporting_errors_returns_result(host):
    """Successful calls return (True, result)."""
    from pyqt_popups.core import call_reporting_errors

    assert call_reporting_errors(host, "add", lambda a, b: a + b, 1, 2) == (True, 3)
    assert host.notifications == []


def test_operation_failure_keeps_original_error():
    """OperationFailure exposes the operation name and the wrapped error."""
    from pyqt_popups.exceptions import OperationFailure, PopupError

    error = RuntimeError("bad")
    failure = OperationFailure("fade", error)
    assert isinstance(failure, PopupError)
    assert failure.operation == "fade"
    assert failure.error is error
    with pytest.raises(PopupError):
        raise failure
