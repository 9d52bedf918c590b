"""Station telemetry events.

Every event a weighing screen emits is declared here together with the
context keys it may carry. Anything else is refused, so provider names,
tokens or free-text notes never end up in the JSONL files.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

EVENT_CONTEXT_KEYS: dict[str, dict[str, frozenset[str]]] = {
    "navigation": {"screen_view": frozenset({"status"})},
    "catalog": {"catalog_load": frozenset({"providers", "products"})},
    "weighing": {
        "record_registered": frozenset({"net_kg", "records", "product_id", "area"}),
        "record_removed": frozenset({"records"}),
    },
    "lot_commit": {"lot_commit_result": frozenset({"records", "total_kg", "retryable"})},
}
# Error events are named after the rejected command: "<action>_failed".
ERROR_CONTEXT_KEYS = frozenset({"category"})
TELEMETRY_CATEGORIES = frozenset(EVENT_CONTEXT_KEYS) | {"error"}


@dataclass(frozen=True)
class TelemetryEvent:
    category: str
    name: str
    station: str
    timestamp_utc: str
    folio: str | None = None
    trace_id: str | None = None
    duration_ms: int | None = None
    success: bool | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        return {key: value for key, value in payload.items() if value is not None}


def _allowed_keys(category: str, name: str) -> frozenset[str]:
    if category not in TELEMETRY_CATEGORIES:
        raise ValueError(f"Unsupported telemetry category: {category}")
    if category == "error":
        if not name.endswith("_failed"):
            raise ValueError(f"Error events must be named '<action>_failed', got {name!r}")
        return ERROR_CONTEXT_KEYS
    try:
        return EVENT_CONTEXT_KEYS[category][name]
    except KeyError:
        raise ValueError(f"Unknown {category} event: {name}") from None


def _clean_context(context: dict[str, Any] | None, allowed: frozenset[str], name: str) -> dict[str, Any] | None:
    if not context:
        return None
    illegal = sorted(key for key in context if key not in allowed)
    if illegal:
        raise ValueError(f"Context keys not allowed on {name}: {illegal}")
    # Weights travel as the same two-decimal strings the backend receives.
    return {key: f"{value:.2f}" if isinstance(value, Decimal) else value for key, value in context.items()}


def build_event(
    *,
    category: str,
    name: str,
    station: str,
    folio: str | None = None,
    trace_id: str | None = None,
    duration_ms: int | None = None,
    success: bool | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    allowed = _allowed_keys(category, name)
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return TelemetryEvent(
        category=category,
        name=name,
        station=station,
        timestamp_utc=stamp,
        folio=folio or None,
        trace_id=trace_id,
        duration_ms=duration_ms,
        success=success,
        error_code=error_code,
        context=_clean_context(context, allowed, name),
    )
