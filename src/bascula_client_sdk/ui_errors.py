from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError, ConflictError, TransportError

_STATUS_MESSAGES = {
    0: "No connection to the weighing server. Check the network and retry.",
    409: "The server rejected the lot as a duplicate. Verify the folio.",
}


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None
    trace_id: str | None = None
    retryable: bool = False

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    if isinstance(exc, TransportError):
        primary = _STATUS_MESSAGES[0]
    elif isinstance(exc, ConflictError):
        primary = _STATUS_MESSAGES[409]
    else:
        primary = exc.message.strip() or "Request failed"
    details = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        details = f"{details}: {exc.details}"
    return UserFacingError(message=primary, details=details, trace_id=exc.trace_id, retryable=exc.is_transient)
