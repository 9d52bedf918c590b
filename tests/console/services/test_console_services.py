from __future__ import annotations

from decimal import Decimal

import pytest

from bascula_client_sdk import IdempotencyKeys, LotCommitRequest, LotCommitResponse, LotDetail
from bascula_client_sdk.exceptions import ServerError, TransportError

from bascula_console.services import CatalogService, CatalogServiceError, LotsService, LotsServiceError


class _FakeCatalogClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    def list_providers(self):
        if self.error:
            raise self.error
        return []

    def list_products(self):
        return []


class _FakeLotsClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []

    def commit_lot(self, payload, transaction_id=None, idempotency_key=None):
        self.calls.append({"payload": payload, "transaction_id": transaction_id, "idempotency_key": idempotency_key})
        if self.error:
            raise self.error
        return LotCommitResponse(lot_id=10, folio=payload.folio)


class _FakeSession:
    def __init__(self, catalog=None, lots=None) -> None:
        self._catalog = catalog or _FakeCatalogClient()
        self._lots = lots or _FakeLotsClient()

    def catalog_client(self):
        return self._catalog

    def lots_client(self):
        return self._lots


def _request() -> LotCommitRequest:
    return LotCommitRequest(
        provider_id=7,
        provider_name="Agricola del Norte SA",
        folio="F-5",
        details=[
            LotDetail(
                id=1,
                product_id=1,
                product_name="Frijol",
                gross_kg=Decimal("3.00"),
                tare_kg=Decimal("1.00"),
                net_kg=Decimal("2.00"),
                captured_at="10:00",
            )
        ],
        total_kg=Decimal("2.00"),
    )


def test_catalog_service_normalizes_transport_errors() -> None:
    error = TransportError(
        code="TRANSPORT_ERROR", message="refused", details=None, trace_id="trace-7", status_code=0
    )
    service = CatalogService(_FakeSession(catalog=_FakeCatalogClient(error)))  # type: ignore[arg-type]

    with pytest.raises(CatalogServiceError) as excinfo:
        service.load_catalog()

    assert excinfo.value.trace_id == "trace-7"
    assert excinfo.value.retryable is True
    assert "No connection" in excinfo.value.message


def test_catalog_service_returns_snapshot() -> None:
    snapshot = CatalogService(_FakeSession()).load_catalog()  # type: ignore[arg-type]

    assert snapshot.providers == []
    assert snapshot.products == []


def test_lots_service_passes_caller_keys() -> None:
    lots = _FakeLotsClient()
    service = LotsService(_FakeSession(lots=lots))  # type: ignore[arg-type]
    keys = IdempotencyKeys(transaction_id="txn-1", idempotency_key="idem-1")

    result = service.commit_lot(_request(), keys=keys)

    assert result.response.lot_id == 10
    assert result.meta.idempotency_key == "idem-1"
    assert lots.calls[0]["idempotency_key"] == "idem-1"
    assert lots.calls[0]["transaction_id"] == "txn-1"


def test_lots_service_mints_keys_when_missing() -> None:
    lots = _FakeLotsClient()
    result = LotsService(_FakeSession(lots=lots)).commit_lot(_request())  # type: ignore[arg-type]

    assert result.meta.idempotency_key.startswith("bascula-f-5-")


def test_lots_service_marks_server_errors_retryable() -> None:
    error = ServerError(code="HTTP_ERROR", message="boom", details=None, trace_id="t-1", status_code=500)
    service = LotsService(_FakeSession(lots=_FakeLotsClient(error)))  # type: ignore[arg-type]

    with pytest.raises(LotsServiceError) as excinfo:
        service.commit_lot(_request())

    assert excinfo.value.retryable is True
    assert excinfo.value.trace_id == "t-1"
    assert excinfo.value.details == "HTTP_ERROR (HTTP 500)"
