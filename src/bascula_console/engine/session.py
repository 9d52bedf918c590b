from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterator

from bascula_client_sdk import net_weight, to_kg
from bascula_client_sdk.weight_math import ZERO_KG

from bascula_console.engine.catalog import CatalogCache
from bascula_console.engine.errors import (
    EmptyLotError,
    FinalizationInProgressError,
    InvalidTransitionError,
    InvalidWeightError,
    NoProductSelectedError,
    ScaleReadError,
    StationBusyError,
    TareNotSetError,
    ValidationError,
)
from bascula_console.engine.ledger import RecordLedger
from bascula_console.engine.models import (
    Area,
    OperatorContext,
    Product,
    RecordIdFactory,
    SessionHeader,
    SessionStatus,
    WeighingRecord,
)
from bascula_console.engine.profiles import StationProfile, auto_folio
from bascula_console.engine.weight_source import WeightSource

logger = logging.getLogger(__name__)

_WEIGHING_STATES = frozenset({SessionStatus.ACTIVE, SessionStatus.REVIEWING})


class WeighingSession:
    """State machine behind one weighing screen.

    Setup -> Active [-> Reviewing] -> Finalizing -> Closed -> Setup. The lot
    commit itself lives in ``LotFinalizer``; this class only exposes the
    ``begin/complete/abort`` hooks it drives.
    """

    def __init__(
        self,
        profile: StationProfile,
        catalog: CatalogCache,
        weight_source: WeightSource,
        *,
        tare_source: WeightSource | None = None,
        operator: OperatorContext | None = None,
        ledger: RecordLedger | None = None,
        id_factory: RecordIdFactory | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.profile = profile
        self.catalog = catalog
        self.weight_source = weight_source
        self.tare_source = tare_source or weight_source
        self.operator = operator or OperatorContext()
        self.ledger = ledger or RecordLedger()
        self.id_factory = id_factory or RecordIdFactory()
        self.clock = clock

        self.header = SessionHeader()
        self.selected_product: Product | None = None
        self.selected_area: Area | None = None
        self.review_selection: list[Product] = []
        self.confirmed_products: tuple[Product, ...] = ()
        self.pending_tare: Decimal = ZERO_KG
        self.pending_gross: Decimal = ZERO_KG
        self.busy: str | None = None

    # -- state ---------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self.header.status

    @property
    def pending_net(self) -> Decimal:
        return net_weight(self.pending_gross, self.pending_tare)

    @property
    def can_register(self) -> bool:
        return self.status in _WEIGHING_STATES and self.selected_product is not None and self.pending_net > 0

    @contextmanager
    def busy_with(self, operation: str) -> Iterator[None]:
        if self.busy is not None:
            raise StationBusyError(f"Station is busy with {self.busy}; wait for it to finish")
        self.busy = operation
        try:
            yield
        finally:
            self.busy = None

    def _require(self, *states: SessionStatus, action: str) -> None:
        if self.status not in states:
            raise InvalidTransitionError(f"Cannot {action} while the session is {self.status.value}")

    def _require_idle(self, action: str) -> None:
        if self.busy is not None:
            raise StationBusyError(f"Cannot {action} while the station is busy with {self.busy}")

    # -- setup ---------------------------------------------------------------

    def arm(self) -> None:
        """Prefill the setup form for stations that work without one."""
        self._require(SessionStatus.SETUP, action="prefill the session")
        if self.profile.auto_folio and not self.header.folio:
            self.header.folio = auto_folio()
        if self.profile.preselect_defaults and self.header.provider is None and self.catalog.is_loaded:
            self.header.provider = next(self.catalog.providers(), None)

    def set_provider(self, provider_id: int | str | None) -> None:
        self._require(SessionStatus.SETUP, action="change the provider")
        if provider_id in (None, ""):
            self.header.provider = None
            return
        provider = self.catalog.find_provider(provider_id)
        if provider is None:
            raise ValidationError(f"Unknown provider {provider_id!r}", fields=["provider"])
        self.header.provider = provider

    def set_folio(self, folio: str) -> None:
        self._require(SessionStatus.SETUP, action="change the folio")
        self.header.folio = (folio or "").strip()

    def start(self, provider_id: int | str | None = None, folio: str | None = None) -> None:
        self._require(SessionStatus.SETUP, action="start a session")
        candidate_folio = (folio if folio is not None else self.header.folio or "").strip()
        has_provider = provider_id not in (None, "") or self.header.provider is not None
        missing = [name for name, present in (("provider", has_provider), ("folio", bool(candidate_folio))) if not present]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)
        self.catalog.ensure_loaded()

        provider = self.header.provider
        if provider_id not in (None, ""):
            provider = self.catalog.find_provider(provider_id)
            if provider is None:
                raise ValidationError(f"Unknown provider {provider_id!r}", fields=["provider"])

        self.header.provider = provider
        self.header.folio = candidate_folio
        self.header.status = SessionStatus.ACTIVE
        if self.profile.preselect_defaults and self.selected_product is None:
            self.selected_product = next(self.catalog.products(), None)
        if self.profile.has_area_routing and self.selected_area is None:
            self.selected_area = next(self.catalog.areas(), None)
        logger.info(
            "session_started",
            extra={"station": self.profile.key, "folio": self.header.folio, "provider_id": provider.id if provider else None},
        )

    # -- selection -----------------------------------------------------------

    def set_notes(self, notes: str) -> None:
        self._require(*_WEIGHING_STATES, action="edit notes")
        self.header.notes = notes or ""

    def select_product(self, product_id: int | str) -> Product:
        self._require(*_WEIGHING_STATES, action="select a product")
        product = self.catalog.find_product(product_id)
        if product is None:
            raise NoProductSelectedError(f"Product {product_id!r} is not available at this station")
        if self.status is SessionStatus.REVIEWING and product not in self.confirmed_products:
            raise NoProductSelectedError(f"Product {product.name} was not confirmed for this shipment")
        self.selected_product = product
        return product

    def select_area(self, area_id: int | str) -> Area:
        self._require(*_WEIGHING_STATES, action="select an area")
        if not self.profile.has_area_routing:
            raise InvalidTransitionError(f"{self.profile.title} does not route records to areas")
        area = self.catalog.find_area(area_id)
        if area is None:
            raise ValidationError(f"Unknown area {area_id!r}", fields=["area"])
        self.selected_area = area
        return area

    # -- review stage (reception) --------------------------------------------

    def toggle_review_product(self, product_id: int | str) -> bool:
        self._require(SessionStatus.ACTIVE, action="change the shipment contents")
        if not self.profile.has_review_stage:
            raise InvalidTransitionError(f"{self.profile.title} has no review stage")
        product = self.catalog.find_product(product_id)
        if product is None:
            raise NoProductSelectedError(f"Product {product_id!r} is not available at this station")
        if product in self.review_selection:
            self.review_selection.remove(product)
            return False
        self.review_selection.append(product)
        return True

    def confirm_review(self) -> tuple[Product, ...]:
        self._require(SessionStatus.ACTIVE, action="confirm the shipment contents")
        if not self.profile.has_review_stage:
            raise InvalidTransitionError(f"{self.profile.title} has no review stage")
        if not self.review_selection:
            raise ValidationError("Select at least one product", fields=["products"])
        self.confirmed_products = tuple(self.review_selection)
        self.selected_product = self.confirmed_products[0]
        self.header.status = SessionStatus.REVIEWING
        logger.info("shipment_confirmed", extra={"station": self.profile.key, "products": len(self.confirmed_products)})
        return self.confirmed_products

    def reopen_review(self) -> None:
        self._require(SessionStatus.REVIEWING, action="go back to product selection")
        self.header.status = SessionStatus.ACTIVE

    # -- capture -------------------------------------------------------------

    def _read(self, source: WeightSource, operation: str) -> Decimal:
        with self.busy_with(operation):
            try:
                reading = to_kg(source.read())
            except Exception as exc:
                logger.warning(
                    "scale_read_failed",
                    extra={"station": self.profile.key, "operation": operation, "error": type(exc).__name__},
                )
                raise ScaleReadError(f"The scale did not return a usable reading ({exc})") from exc
        if reading < 0:
            raise InvalidWeightError(f"Scale returned a negative reading ({reading})")
        return reading

    def capture_tare(self) -> Decimal:
        self._require(*_WEIGHING_STATES, action="capture tare")
        reading = self._read(self.tare_source, "capture_tare")
        self.pending_tare = reading
        self.pending_gross = ZERO_KG
        logger.info("tare_captured", extra={"station": self.profile.key, "tare_kg": str(reading)})
        return reading

    def capture_gross(self) -> Decimal:
        self._require(*_WEIGHING_STATES, action="capture gross weight")
        if self.pending_tare <= 0:
            raise TareNotSetError("Capture the container tare first")
        reading = self._read(self.weight_source, "capture_gross")
        self.pending_gross = reading
        logger.info("gross_captured", extra={"station": self.profile.key, "gross_kg": str(reading)})
        return reading

    def register_record(self) -> WeighingRecord:
        self._require(*_WEIGHING_STATES, action="register a record")
        self._require_idle("register a record")
        product = self.selected_product
        if product is None:
            raise NoProductSelectedError("Select a product before registering")
        net = self.pending_net
        if net <= 0:
            raise InvalidWeightError("Capture a product weight greater than the tare")

        record = WeighingRecord(
            id=self.id_factory.next_id(),
            product_id=product.id,
            product_name=product.name,
            unit=product.unit,
            gross=self.pending_gross,
            tare=self.pending_tare,
            net=net,
            captured_at=self.clock(),
            area=self.selected_area if self.profile.has_area_routing else None,
        )
        self.ledger.add(record)
        self.pending_gross = ZERO_KG
        if self.profile.requires_tare_per_item:
            self.pending_tare = ZERO_KG
        logger.info(
            "record_registered",
            extra={"station": self.profile.key, "record_id": record.id, "net_kg": str(record.net)},
        )
        return record

    def remove_record(self, record_id: int) -> bool:
        self._require(*_WEIGHING_STATES, action="remove a record")
        self._require_idle("remove a record")
        removed = self.ledger.remove_by_id(record_id)
        if removed:
            logger.info("record_removed", extra={"station": self.profile.key, "record_id": record_id})
        return removed

    # -- finalization hooks --------------------------------------------------

    def begin_finalize(self) -> None:
        if self.status is SessionStatus.FINALIZING:
            raise FinalizationInProgressError("A lot is already being submitted")
        self._require(*_WEIGHING_STATES, action="close the lot")
        if self.busy is not None:
            raise FinalizationInProgressError(f"Cannot close the lot while the station is busy with {self.busy}")
        if self.ledger.is_empty():
            raise EmptyLotError("Register at least one weight before closing the lot")
        self.header.status = SessionStatus.FINALIZING

    def abort_finalize(self) -> None:
        self._require(SessionStatus.FINALIZING, action="roll back the lot close")
        self.header.status = SessionStatus.ACTIVE

    def complete_finalize(self) -> None:
        self._require(SessionStatus.FINALIZING, action="complete the lot close")
        self.header.status = SessionStatus.CLOSED
        self.ledger.clear()
        logger.info("lot_closed", extra={"station": self.profile.key, "folio": self.header.folio})
        self._rearm(keep_provider=self.profile.auto_folio)

    def reset(self) -> None:
        if self.status is SessionStatus.FINALIZING:
            raise FinalizationInProgressError("Cannot reset while a lot is being submitted")
        self._require_idle("reset the station")
        self.ledger.clear()
        self._rearm(keep_provider=self.profile.preselect_defaults)
        logger.info("session_reset", extra={"station": self.profile.key})

    def _rearm(self, *, keep_provider: bool) -> None:
        provider = self.header.provider if keep_provider else None
        area = self.selected_area
        product = self.selected_product if self.profile.preselect_defaults else None
        self.header = SessionHeader()
        self.review_selection = []
        self.confirmed_products = ()
        self.pending_tare = ZERO_KG
        self.pending_gross = ZERO_KG
        self.selected_product = product
        self.selected_area = area if self.profile.has_area_routing else None
        if self.profile.auto_folio and provider is not None:
            # Outbound weighing never shows a setup form: straight back to Active.
            self.header.provider = provider
            self.header.folio = auto_folio()
            self.header.status = SessionStatus.ACTIVE
        elif self.profile.auto_folio or self.profile.preselect_defaults:
            self.arm()
