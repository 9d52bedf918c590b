from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Callable

from bascula_client_sdk import format_kg

from bascula_console.app.logger import get_logger, log_action
from bascula_console.engine import (
    CommitFailure,
    LotFinalizer,
    LotReceipt,
    SessionStatus,
    WeighingError,
    WeighingSession,
)
from bascula_console.shared.telemetry import TelemetryLogger, build_event
from bascula_console.ui.operations.components import FinishLotDialog, LedgerTable, ProductGrid, ScaleDisplay
from bascula_console.ui.shared import ErrorPresenter, NotificationCenter, RetryPanel, resolve_state

logger = logging.getLogger(__name__)
audit_logger = get_logger("bascula_console.audit")


@dataclass
class WeighingStationView:
    """Operator-facing commands for one weighing screen.

    Every command returns a result dict; engine rejections come back as
    ``{"ok": False, ...}`` and never escape as exceptions.
    """

    session: WeighingSession
    finalizer: LotFinalizer
    telemetry: TelemetryLogger | None = None
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    presenter: ErrorPresenter = field(default_factory=ErrorPresenter)
    error_message: str | None = None
    trace_id: str | None = None
    finish_dialog_open: bool = False
    last_receipt: LotReceipt | None = None
    last_failure: CommitFailure | None = None

    @property
    def title(self) -> str:
        return self.session.profile.title

    @property
    def module(self) -> str:
        return self.session.profile.key

    # -- lifecycle -----------------------------------------------------------

    def mount(self) -> dict[str, Any]:
        started = perf_counter()
        try:
            with self.session.busy_with("load_catalog"):
                self.session.catalog.load()
        except WeighingError as exc:
            self._emit("catalog", "catalog_load", success=False, started=started, error_code=exc.code)
            return self._rejected("mount", exc)
        if self.session.status is SessionStatus.SETUP:
            self.session.arm()
            if self.session.profile.auto_folio and self.session.header.provider is not None:
                self.session.start()
        self.error_message = None
        catalog = self.session.catalog
        self._emit(
            "catalog",
            "catalog_load",
            success=True,
            started=started,
            context={"providers": sum(1 for _ in catalog.providers()), "products": sum(1 for _ in catalog.products())},
        )
        self._emit("navigation", "screen_view", success=True, context={"status": self.session.status.value})
        return {"ok": True, "status": self.session.status.value}

    def start(self, provider_id: int | str | None, folio: str | None) -> dict[str, Any]:
        return self._command(
            "start",
            lambda: self.session.start(provider_id, folio),
            lambda _: {"status": self.session.status.value, "folio": self.session.header.folio},
        )

    # -- selection -----------------------------------------------------------

    def select_product(self, product_id: int | str) -> dict[str, Any]:
        return self._command(
            "select_product",
            lambda: self.session.select_product(product_id),
            lambda product: {"product": {"id": product.id, "name": product.name, "unit": product.unit}},
        )

    def select_area(self, area_id: int | str) -> dict[str, Any]:
        return self._command(
            "select_area",
            lambda: self.session.select_area(area_id),
            lambda area: {"area": {"id": area.id, "name": area.name, "routing_tag": area.routing_tag}},
        )

    def toggle_review_product(self, product_id: int | str) -> dict[str, Any]:
        return self._command(
            "toggle_review_product",
            lambda: self.session.toggle_review_product(product_id),
            lambda selected: {"product_id": product_id, "in_shipment": selected},
        )

    def confirm_review(self) -> dict[str, Any]:
        return self._command(
            "confirm_review",
            self.session.confirm_review,
            lambda products: {"status": self.session.status.value, "products": [p.id for p in products]},
        )

    def reopen_review(self) -> dict[str, Any]:
        return self._command(
            "reopen_review",
            self.session.reopen_review,
            lambda _: {"status": self.session.status.value},
        )

    def set_notes(self, notes: str) -> dict[str, Any]:
        return self._command(
            "set_notes",
            lambda: self.session.set_notes(notes),
            lambda _: {"notes": self.session.header.notes},
        )

    # -- capture -------------------------------------------------------------

    def capture_tare(self) -> dict[str, Any]:
        return self._command(
            "capture_tare",
            self.session.capture_tare,
            lambda _: {"scale": self._scale().render()},
        )

    def capture_gross(self) -> dict[str, Any]:
        return self._command(
            "capture_gross",
            self.session.capture_gross,
            lambda _: {"scale": self._scale().render()},
        )

    def register(self) -> dict[str, Any]:
        result = self._command(
            "register",
            self.session.register_record,
            lambda record: {"record": record.render(), "ledger": self._ledger().render()},
        )
        if result["ok"]:
            newest = self.session.ledger.snapshot()[0]
            self._emit(
                "weighing",
                "record_registered",
                success=True,
                context={
                    "net_kg": newest.net,
                    "records": len(self.session.ledger),
                    "product_id": newest.product_id,
                    "area": newest.area.routing_tag if newest.area else None,
                },
            )
        return result

    def remove_record(self, record_id: int) -> dict[str, Any]:
        result = self._command(
            "remove_record",
            lambda: self.session.remove_record(record_id),
            lambda removed: {"removed": removed, "ledger": self._ledger().render()},
        )
        if result.get("removed"):
            self._emit("weighing", "record_removed", success=True, context={"records": len(self.session.ledger)})
        return result

    # -- lot close -----------------------------------------------------------

    def open_finish(self) -> dict[str, Any]:
        if self.session.ledger.is_empty():
            return {"ok": False, "error": "Register at least one weight before closing the lot", "code": "EMPTY_LOT"}
        try:
            request = self.finalizer.build_request()
        except WeighingError as exc:
            return self._rejected("open_finish", exc)
        self.finish_dialog_open = True
        return {"ok": True, "dialog": FinishLotDialog(request, notes=request.notes).render()}

    def finish(self, notes: str | None = None) -> dict[str, Any]:
        if self.finalizer.in_flight or self.session.status is SessionStatus.FINALIZING:
            return {"ok": False, "error": "Lot close already in progress", "code": "FINALIZATION_IN_PROGRESS"}
        if notes is not None:
            edited = self.set_notes(notes)
            if not edited["ok"]:
                return edited
        if not self.session.ledger.is_empty():
            try:
                request = self.finalizer.build_request()
            except WeighingError as exc:
                return self._rejected("finish", exc)
            dialog = FinishLotDialog(request, notes=request.notes)
            if not dialog.validate():
                return {"ok": False, "error": "Invalid lot", "issues": dialog.issues, "dialog": dialog.render()}

        folio = self.session.header.folio
        started = perf_counter()
        try:
            receipt = self.finalizer.finalize()
        except CommitFailure as exc:
            self.last_failure = exc
            self._emit(
                "lot_commit",
                "lot_commit_result",
                success=False,
                started=started,
                trace_id=exc.trace_id,
                folio=folio,
                context={"records": len(self.session.ledger), "retryable": exc.retryable},
            )
            self._audit("finish", folio=folio, trace_id=exc.trace_id, outcome="failed")
            result = self._rejected("finish", exc)
            result["not_applied"] = True
            result["retry"] = self._retry_panel().render()
            return result
        except WeighingError as exc:
            return self._rejected("finish", exc)

        self.last_receipt = receipt
        self.last_failure = None
        self.finish_dialog_open = False
        self.error_message = None
        self.trace_id = receipt.trace_id
        self._emit(
            "lot_commit",
            "lot_commit_result",
            success=True,
            started=started,
            trace_id=receipt.trace_id,
            folio=receipt.folio,
            context={"records": receipt.record_count, "total_kg": receipt.total_kg},
        )
        self._audit("finish", folio=receipt.folio, trace_id=receipt.trace_id, outcome="success")
        self.notifications.dismiss_errors()
        self.notifications.push(
            level="success",
            title="Lot saved",
            message=f"Lot {receipt.folio} saved: {receipt.record_count} records, {format_kg(receipt.total_kg)} kg",
            details={"lot_id": receipt.lot_id, "trace_id": receipt.trace_id},
        )
        return {
            "ok": True,
            "folio": receipt.folio,
            "lot_id": receipt.lot_id,
            "total_kg": format_kg(receipt.total_kg),
            "record_count": receipt.record_count,
            "trace_id": receipt.trace_id,
            "status": self.session.status.value,
        }

    def reset(self, *, confirmed: bool) -> dict[str, Any]:
        if not confirmed:
            return {"ok": False, "error": "Reset confirmation is required"}
        folio = self.session.header.folio
        result = self._command("reset", self.session.reset, lambda _: {"status": self.session.status.value})
        if result["ok"]:
            self.finalizer.forget_attempt()
            self.finish_dialog_open = False
            self.last_failure = None
            self._audit("reset", folio=folio, trace_id=None, outcome="success")
        return result

    # -- rendering -----------------------------------------------------------

    def render(self) -> dict[str, Any]:
        session = self.session
        catalog = session.catalog
        products = list(catalog.products()) if catalog.is_loaded else []
        header = session.header
        return {
            "station": session.profile.key,
            "title": session.profile.title,
            "status": session.status.value,
            "header": {
                "provider": {"id": header.provider.id, "name": header.provider.legal_name} if header.provider else None,
                "folio": header.folio,
                "notes": header.notes,
            },
            "providers": [{"id": p.id, "name": p.legal_name} for p in catalog.providers()] if catalog.is_loaded else [],
            "products": ProductGrid(
                products,
                selected=session.selected_product,
                reviewed=tuple(session.review_selection),
                confirmed=session.confirmed_products if session.status is SessionStatus.REVIEWING else (),
            ).render(),
            "areas": [
                {"id": a.id, "name": a.name, "selected": a == session.selected_area} for a in catalog.areas()
            ]
            if session.profile.has_area_routing
            else [],
            "scale": self._scale().render(),
            "ledger": self._ledger().render(),
            "view_state": resolve_state(
                busy=session.busy,
                catalog_loaded=catalog.is_loaded,
                error=self.error_message,
                has_records=not session.ledger.is_empty(),
                trace_id=self.trace_id,
            ).render(),
            "notifications": self.notifications.render(),
            "retry": self._retry_panel().render() if self.last_failure else None,
            "guards": {
                "disable_while_busy": session.busy is not None,
                "double_submit_protection": True,
                "reset_requires_confirmation": True,
                "finish_dialog_open": self.finish_dialog_open,
            },
        }

    # -- helpers -------------------------------------------------------------

    def _scale(self) -> ScaleDisplay:
        return ScaleDisplay(
            tare=self.session.pending_tare,
            gross=self.session.pending_gross,
            product_selected=self.session.selected_product is not None,
        )

    def _ledger(self) -> LedgerTable:
        return LedgerTable(self.session.ledger.snapshot())

    def _retry_panel(self) -> RetryPanel:
        keys = self.finalizer.pending_keys
        return RetryPanel(
            folio=self.session.header.folio,
            idempotency_key=keys.idempotency_key if keys else None,
            failure=self.last_failure,
        )

    def _command(
        self,
        action: str,
        operation: Callable[[], Any],
        on_success: Callable[[Any], dict[str, Any]],
    ) -> dict[str, Any]:
        try:
            value = operation()
        except WeighingError as exc:
            return self._rejected(action, exc)
        self.error_message = None
        return {"ok": True, **on_success(value)}

    def _rejected(self, action: str, exc: WeighingError) -> dict[str, Any]:
        presented = self.presenter.present_exception(exc, action=f"{self.module}.{action}")
        trace_id = getattr(exc, "trace_id", None)
        self.error_message = presented.user_message
        self.trace_id = trace_id or self.trace_id
        self.notifications.push(
            level="error",
            title=action,
            message=presented.user_message,
            details={"code": presented.code, "trace_id": trace_id},
        )
        logger.info("station_command_rejected", extra={"station": self.module, "action": action, "code": exc.code})
        if presented.category not in {"validation", "workflow", "scale"}:
            self._emit(
                "error",
                f"{action}_failed",
                success=False,
                trace_id=trace_id,
                error_code=exc.code,
                context={"category": presented.category},
            )
        result: dict[str, Any] = {
            "ok": False,
            "error": presented.user_message,
            "code": exc.code,
            "category": presented.category,
            "trace_id": trace_id,
        }
        fields = getattr(exc, "fields", None)
        if fields:
            result["fields"] = list(fields)
        return result

    def _emit(
        self,
        category: str,
        name: str,
        *,
        success: bool,
        started: float | None = None,
        trace_id: str | None = None,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        folio: str | None = None,
    ) -> None:
        if self.telemetry is None:
            return
        self.telemetry.emit(
            build_event(
                category=category,
                name=name,
                station=self.module,
                folio=folio if folio is not None else self.session.header.folio,
                trace_id=trace_id,
                duration_ms=int((perf_counter() - started) * 1000) if started is not None else None,
                success=success,
                error_code=error_code,
                context=context,
            )
        )

    def _audit(self, action: str, *, folio: str | None, trace_id: str | None, outcome: str) -> None:
        operator = self.session.operator
        log_action(
            audit_logger,
            module=self.module,
            action=action,
            operator_id=operator.user_id,
            station_id=operator.station_id,
            folio=folio,
            trace_id=trace_id,
            outcome=outcome,
        )
