from .error_presenter import ErrorPresenter, PresentedError
from .notification_center import NotificationCenter
from .retry_panel import RetryPanel
from .view_state import ViewState, ViewStateStatus, resolve_state

__all__ = [
    "ErrorPresenter",
    "NotificationCenter",
    "PresentedError",
    "RetryPanel",
    "ViewState",
    "ViewStateStatus",
    "resolve_state",
]
