from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ViewStateStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    READY = "ready"
    SUBMITTING = "submitting"
    PARTIAL_ERROR = "partial_error"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class ViewState:
    status: ViewStateStatus
    message: str | None = None
    trace_id: str | None = None
    data_available: bool = False

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "trace_id": self.trace_id,
            "data_available": self.data_available,
        }


def resolve_state(
    *,
    busy: str | None,
    catalog_loaded: bool,
    error: str | None,
    has_records: bool,
    trace_id: str | None = None,
) -> ViewState:
    if busy == "load_catalog":
        return ViewState(ViewStateStatus.LOADING, "Loading catalogs...", trace_id=trace_id)
    if busy is not None:
        return ViewState(ViewStateStatus.SUBMITTING, f"Working ({busy})...", trace_id=trace_id, data_available=has_records)
    if not catalog_loaded:
        return ViewState(ViewStateStatus.FATAL_ERROR, error or "Catalogs unavailable", trace_id=trace_id)
    if error:
        return ViewState(ViewStateStatus.PARTIAL_ERROR, error, trace_id=trace_id, data_available=has_records)
    if not has_records:
        return ViewState(ViewStateStatus.EMPTY, "No weighings registered", trace_id=trace_id)
    return ViewState(ViewStateStatus.READY, "Ready", trace_id=trace_id, data_available=True)
