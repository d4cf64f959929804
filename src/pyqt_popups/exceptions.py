"""Popup exceptions."""


class PopupError(Exception):
    """Base class for popup failures reported to the host."""


class InvalidContentError(PopupError):
    """Raised when a popup has no resolvable buffer."""


class InvalidWindowError(PopupError):
    """Raised when an operation needs a visible popup window."""


class OperationFailure(PopupError):
    """Raised (or reported) when a popup operation throws at invocation."""

    def __init__(self, operation: str, error: BaseException):
        super().__init__(f"{operation}: {error}")
        self.operation = operation
        self.error = error
