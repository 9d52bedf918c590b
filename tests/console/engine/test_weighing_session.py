from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from bascula_console.engine import (
    OUTBOUND,
    RECEPTION,
    WASHING,
    CatalogUnavailableError,
    InvalidTransitionError,
    InvalidWeightError,
    NoProductSelectedError,
    ScaleReadError,
    SessionStatus,
    StationBusyError,
    TareNotSetError,
    ValidationError,
)
from weighing_helpers import FIXED_NOW, make_session, weigh


def test_start_requires_provider_and_folio() -> None:
    session = make_session()

    with pytest.raises(ValidationError) as excinfo:
        session.start(None, "  ")

    assert excinfo.value.fields == ["provider", "folio"]
    assert excinfo.value.code == "SESSION_FIELDS_REQUIRED"
    assert session.status is SessionStatus.SETUP
    assert session.header.folio == ""


def test_start_fails_when_catalog_is_not_loaded() -> None:
    session = make_session(load=False)

    with pytest.raises(CatalogUnavailableError):
        session.start(7, "F-100")

    assert session.status is SessionStatus.SETUP


def test_start_rejects_unknown_provider() -> None:
    session = make_session()

    with pytest.raises(ValidationError) as excinfo:
        session.start(999, "F-100")

    assert excinfo.value.fields == ["provider"]
    assert session.status is SessionStatus.SETUP


def test_start_moves_to_active() -> None:
    session = make_session()

    session.start("7", " F-100 ")

    assert session.status is SessionStatus.ACTIVE
    assert session.header.provider is not None
    assert session.header.provider.legal_name == "Agricola del Norte SA"
    assert session.header.folio == "F-100"


def test_tare_then_gross_gives_net() -> None:
    session = make_session(weights=["15.70"], tares=["1.20"])
    session.start(7, "F-1")
    session.select_product(1)

    assert session.capture_tare() == Decimal("1.20")
    assert session.capture_gross() == Decimal("15.70")
    record = session.register_record()

    assert record.net == Decimal("14.50")
    assert record.gross == Decimal("15.70")
    assert record.tare == Decimal("1.20")
    assert record.product_name == "Frijol negro"
    assert record.unit == "KG"
    assert record.hour == FIXED_NOW.strftime("%H:%M")
    assert session.pending_tare == Decimal("0.00")
    assert session.pending_gross == Decimal("0.00")


def test_gross_before_tare_is_rejected() -> None:
    session = make_session(weights=["20.00"])
    session.start(7, "F-1")

    with pytest.raises(TareNotSetError):
        session.capture_gross()

    assert session.weight_source.remaining() == 1
    assert session.ledger.is_empty()


def test_new_tare_resets_pending_gross() -> None:
    session = make_session(weights=["20.00"], tares=["1.00", "2.00"])
    session.start(7, "F-1")
    session.capture_tare()
    session.capture_gross()

    session.capture_tare()

    assert session.pending_tare == Decimal("2.00")
    assert session.pending_gross == Decimal("0.00")


def test_register_requires_a_product() -> None:
    session = make_session(weights=["20.00"], tares=["1.00"])
    session.start(7, "F-1")
    session.capture_tare()
    session.capture_gross()

    with pytest.raises(NoProductSelectedError):
        session.register_record()

    assert session.ledger.is_empty()
    assert session.pending_tare == Decimal("1.00")


def test_register_rejects_non_positive_net_and_keeps_tare() -> None:
    session = make_session(weights=["1.00"], tares=["1.50"])
    session.start(7, "F-1")
    session.select_product(1)
    session.capture_tare()
    session.capture_gross()

    assert session.pending_net == Decimal("0.00")
    with pytest.raises(InvalidWeightError):
        session.register_record()

    assert session.pending_tare == Decimal("1.50")
    assert session.ledger.is_empty()


def test_negative_scale_reading_is_rejected() -> None:
    session = make_session(tares=["-0.40"])
    session.start(7, "F-1")

    with pytest.raises(InvalidWeightError):
        session.capture_tare()

    assert session.pending_tare == Decimal("0.00")


def test_ledger_totals_and_order() -> None:
    session = make_session()
    session.start(7, "F-1")

    first = weigh(session, "1.00", "11.00")
    second = weigh(session, "0.75", "6.00")

    assert session.ledger.total() == Decimal("15.25")
    assert [record.id for record in session.ledger] == [second.id, first.id]
    assert second.id > first.id


def test_remove_unknown_record_is_a_no_op() -> None:
    session = make_session()
    session.start(7, "F-1")
    record = weigh(session, "1.00", "11.00")

    assert session.remove_record(record.id + 1000) is False
    assert len(session.ledger) == 1

    assert session.remove_record(record.id) is True
    assert session.remove_record(record.id) is False
    assert session.ledger.is_empty()


def test_commands_outside_active_are_rejected() -> None:
    session = make_session(tares=["1.00"])

    with pytest.raises(InvalidTransitionError):
        session.capture_tare()
    with pytest.raises(InvalidTransitionError):
        session.select_product(1)

    assert session.tare_source.remaining() == 1


def test_setup_fields_are_locked_once_active() -> None:
    session = make_session()
    session.start(7, "F-1")

    with pytest.raises(InvalidTransitionError):
        session.set_folio("F-2")

    assert session.header.folio == "F-1"


def test_busy_station_rejects_mutations() -> None:
    session = make_session(tares=["1.00"])
    session.start(7, "F-1")

    with session.busy_with("load_catalog"):
        with pytest.raises(StationBusyError):
            session.capture_tare()
        with pytest.raises(StationBusyError):
            session.reset()

    assert session.busy is None
    assert session.capture_tare() == Decimal("1.00")


def test_reset_clears_everything() -> None:
    session = make_session(tares=["2.00"])
    session.start(7, "F-1")
    weigh(session, "1.00", "11.00")
    session.capture_tare()

    session.reset()

    assert session.status is SessionStatus.SETUP
    assert session.ledger.is_empty()
    assert session.pending_tare == Decimal("0.00")
    assert session.header.provider is None
    assert session.header.folio == ""
    assert session.selected_product is None


def test_tare_is_kept_when_profile_reuses_containers() -> None:
    session = make_session(replace(WASHING, requires_tare_per_item=False))
    session.start(7, "F-1")
    weigh(session, "1.10", "10.00")
    session.weight_source.push("12.00")

    session.capture_gross()
    record = session.register_record()

    assert record.tare == Decimal("1.10")
    assert record.net == Decimal("10.90")


def test_reception_review_stage() -> None:
    session = make_session(RECEPTION, weights=["30.00"], tares=["1.00"])
    session.start(7, "REC-1")

    with pytest.raises(ValidationError) as excinfo:
        session.confirm_review()
    assert excinfo.value.fields == ["products"]

    assert session.toggle_review_product(2) is True
    assert session.toggle_review_product(1) is True
    assert session.toggle_review_product(1) is False
    confirmed = session.confirm_review()

    assert [product.id for product in confirmed] == [2]
    assert session.status is SessionStatus.REVIEWING
    assert session.selected_product is not None and session.selected_product.id == 2
    with pytest.raises(NoProductSelectedError):
        session.select_product(1)

    session.capture_tare()
    session.capture_gross()
    record = session.register_record()
    assert record.product_id == 2

    session.reopen_review()
    assert session.status is SessionStatus.ACTIVE
    assert len(session.ledger) == 1


def test_reception_hides_byproducts() -> None:
    session = make_session(RECEPTION)
    session.start(7, "REC-1")

    assert [product.id for product in session.catalog.products()] == [1, 2]
    with pytest.raises(NoProductSelectedError):
        session.toggle_review_product(9)


def test_washing_has_no_review_stage() -> None:
    session = make_session(WASHING)
    session.start(7, "LAV-1")

    with pytest.raises(InvalidTransitionError):
        session.toggle_review_product(1)


def test_outbound_prefills_and_routes_areas() -> None:
    session = make_session(OUTBOUND, weights=["40.00"], tares=["1.50"])

    session.arm()
    assert session.header.folio.startswith("AUTO-")
    assert session.header.provider is not None and session.header.provider.id == 7

    session.start()
    assert session.status is SessionStatus.ACTIVE
    assert session.selected_product is not None and session.selected_product.id == 1
    assert session.selected_area is not None and session.selected_area.name == "Limpieza"

    session.select_area(3)
    session.capture_tare()
    session.capture_gross()
    record = session.register_record()

    assert record.area is not None and record.area.routing_tag == "sale"
    assert record.to_detail().area == "Venta"


def test_area_selection_only_on_outbound() -> None:
    session = make_session(WASHING)
    session.start(7, "LAV-1")

    with pytest.raises(InvalidTransitionError):
        session.select_area(1)


def test_outbound_rejects_unknown_area() -> None:
    session = make_session(OUTBOUND)
    session.arm()
    session.start()

    with pytest.raises(ValidationError):
        session.select_area(42)

    assert session.selected_area is not None and session.selected_area.id == 1


class _BrokenScale:
    def __init__(self, reading: object = None, error: Exception | None = None) -> None:
        self.reading = reading
        self.error = error

    def read(self):
        if self.error is not None:
            raise self.error
        return self.reading


@pytest.mark.parametrize(
    "scale",
    [
        _BrokenScale(error=OSError("serial port closed")),
        _BrokenScale(reading=Decimal("NaN")),
        _BrokenScale(reading="ERR"),
    ],
)
def test_scale_read_failures_are_wrapped(scale: _BrokenScale) -> None:
    session = make_session(tares=["1.00"])
    session.start(7, "F-1")
    session.capture_tare()
    session.weight_source = scale

    with pytest.raises(ScaleReadError) as excinfo:
        session.capture_gross()

    assert excinfo.value.code == "SCALE_READ_FAILED"
    assert session.busy is None
    assert session.pending_tare == Decimal("1.00")
    assert session.pending_gross == Decimal("0.00")


def test_empty_replay_source_is_a_scale_read_error() -> None:
    session = make_session()
    session.start(7, "F-1")

    with pytest.raises(ScaleReadError):
        session.capture_tare()


def test_notes_can_only_be_edited_while_weighing() -> None:
    session = make_session()

    with pytest.raises(InvalidTransitionError):
        session.set_notes("x")

    session.start(7, "F-1")
    session.set_notes("tarimas de madera")
    assert session.header.notes == "tarimas de madera"

    session.reset()
    assert session.header.notes == ""
