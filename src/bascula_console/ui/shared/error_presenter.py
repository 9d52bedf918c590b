from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from bascula_console.engine.errors import CommitFailure, WeighingError


@dataclass(frozen=True)
class PresentedError:
    category: str
    user_message: str
    safe_to_retry: bool
    code: str
    details: dict[str, Any]


class ErrorPresenter:
    """Turns engine rejections and commit failures into operator-facing payloads."""

    _CATEGORY_MESSAGES = {
        "validation": "Please review the highlighted fields and try again.",
        "workflow": "That action is not available right now.",
        "scale": "Invalid scale reading. Weigh again.",
        "catalog": "Providers and products could not be loaded.",
        "conflict": "The server rejected the lot as a conflict. Verify the folio.",
        "transport": "No connection to the server. Your weighings are kept; retry.",
        "server": "Server error. Your weighings are kept; retry in a moment.",
        "unknown": "Unexpected error. Please try again.",
    }

    _CODE_CATEGORIES = {
        "SESSION_FIELDS_REQUIRED": "validation",
        "NO_PRODUCT_SELECTED": "validation",
        "EMPTY_LOT": "validation",
        "TARE_NOT_SET": "scale",
        "INVALID_WEIGHT": "scale",
        "SCALE_READ_FAILED": "scale",
        "INVALID_TRANSITION": "workflow",
        "STATION_BUSY": "workflow",
        "FINALIZATION_IN_PROGRESS": "workflow",
        "CATALOG_UNAVAILABLE": "catalog",
    }

    def present_exception(self, exc: WeighingError, *, action: str) -> PresentedError:
        if isinstance(exc, CommitFailure):
            return self.present(
                message=exc.message,
                details=exc.details,
                trace_id=exc.trace_id,
                action=action,
                code=exc.code,
                allow_retry=exc.retryable,
            )
        return self.present(message=exc.message, action=action, code=exc.code)

    def present(
        self,
        *,
        message: str,
        details: Any = None,
        trace_id: str | None = None,
        action: str,
        code: str | None = None,
        allow_retry: bool = False,
    ) -> PresentedError:
        normalized_code = (code or "UNKNOWN").upper()
        category = self._CODE_CATEGORIES.get(normalized_code) or self._categorize(message=message, details=details)
        safe_to_retry = allow_retry and category in {"transport", "server"}
        technical = {
            "code": normalized_code,
            "trace_id": trace_id,
            "action": action,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "raw_details": details,
        }
        # Engine messages already name the offending field or step.
        user_message = message if category in {"validation", "workflow", "scale"} else self._CATEGORY_MESSAGES[category]
        return PresentedError(
            category=category,
            user_message=user_message,
            safe_to_retry=safe_to_retry,
            code=normalized_code,
            details=technical,
        )

    @staticmethod
    def _categorize(*, message: str, details: Any) -> str:
        haystack = f"{message} {details}".lower()
        if any(token in haystack for token in ("validation", "required", "client_validation", "422")):
            return "validation"
        if any(token in haystack for token in ("conflict", "duplicate", "409")):
            return "conflict"
        if any(token in haystack for token in ("connection", "network", "timeout", "transport", "http 0")):
            return "transport"
        if any(token in haystack for token in ("server", "http 5", "unavailable")):
            return "server"
        return "unknown"
