"""Error boundary for popup operations.

Failures inside operations are UI errors: they are logged, pushed to the
host's transient notification channel and never propagate into the caller's
event loop.
"""

import logging
from typing import Any, Callable, Optional, Tuple, TYPE_CHECKING

from pyqt_popups.exceptions import OperationFailure, PopupError

if TYPE_CHECKING:
    from pyqt_popups.protocols.host_surface import HostSurfaceABC

logger = logging.getLogger(__name__)


def report_ui_error(host: Optional["HostSurfaceABC"], error: BaseException) -> None:
    """Log ``error`` and show it through the host notification channel."""
    logger.warning(f"[POPUP] {type(error).__name__}: {error}")
    if host is None:
        return
    try:
        host.notify(f"popup: {error}", level="error")
    except Exception as e:
        logger.error(f"[POPUP] Host failed to display error notification: {e}")


def call_reporting_errors(
    host: Optional["HostSurfaceABC"],
    operation: str,
    fn: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> Tuple[bool, Any]:
    """Protected call. Returns ``(ok, result)``; failures are reported, not raised."""
    try:
        return True, fn(*args, **kwargs)
    except PopupError as e:
        report_ui_error(host, e)
    except Exception as e:
        logger.debug(f"[POPUP] Operation '{operation}' raised", exc_info=True)
        report_ui_error(host, OperationFailure(operation, e))
    return False, None
