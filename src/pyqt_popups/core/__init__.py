"""
Core utilities.

Timer adapters, pure merge helpers and the error reporting boundary.
Nothing in here knows about popups.
"""

from .deferred_timer import Deferrer, DeferredCall, QtDeferrer, QtDeferredCall
from .manual_clock import ManualClock, ManualCall
from .merge_utils import merge_overwrite, merge_defaults
from .error_reporting import report_ui_error, call_reporting_errors

__all__ = [
    "Deferrer",
    "DeferredCall",
    "QtDeferrer",
    "QtDeferredCall",
    "ManualClock",
    "ManualCall",
    "merge_overwrite",
    "merge_defaults",
    "report_ui_error",
    "call_reporting_errors",
]
