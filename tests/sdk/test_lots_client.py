from __future__ import annotations

import json
from decimal import Decimal

import pytest
import responses

from bascula_client_sdk import ApiSession, ClientConfig, LotCommitRequest, LotDetail, LotValidationError
from bascula_client_sdk.clients.lots_client import COMMIT_LOT_PATH
from bascula_client_sdk.exceptions import ConflictError

BASE = "http://bascula.local"


def _session() -> ApiSession:
    cfg = ClientConfig(api_base_url=BASE, retries=3, retry_backoff_seconds=0)
    return ApiSession(cfg, token="tok-1")


def _request(**overrides) -> LotCommitRequest:
    detail = LotDetail(
        id=1715000000001,
        product_id=1,
        product_name="Frijol",
        unit="KG",
        gross_kg=Decimal("15.70"),
        tare_kg=Decimal("1.20"),
        net_kg=Decimal("14.50"),
        captured_at="09:41",
    )
    values = {
        "provider_id": 7,
        "provider_name": "Agricola del Norte SA",
        "folio": "F-10",
        "notes": "",
        "details": [detail],
        "total_kg": Decimal("14.50"),
    }
    values.update(overrides)
    return LotCommitRequest(**values)


@responses.activate
def test_commit_lot_posts_wire_payload_with_idempotency_key() -> None:
    responses.add(responses.POST, f"{BASE}{COMMIT_LOT_PATH}", json={"IdLote": 55, "message": "ok"}, status=201)

    response = _session().lots_client().commit_lot(_request(), transaction_id="txn-1", idempotency_key="idem-1")

    assert response.lot_id == 55
    assert response.folio == "F-10"
    sent = responses.calls[0].request
    assert sent.headers["Idempotency-Key"] == "idem-1"
    body = json.loads(sent.body)
    assert body == {
        "IdProveedor": 7,
        "RazonSocial": "Agricola del Norte SA",
        "folio": "F-10",
        "observaciones": "",
        "detalles": [
            {
                "id": 1715000000001,
                "IdProducto": 1,
                "producto": "Frijol",
                "unidad": "KG",
                "peso_bruto": "15.70",
                "tara": "1.20",
                "peso": "14.50",
                "hora": "09:41",
            }
        ],
        "total_kg": "14.50",
    }


@responses.activate
def test_commit_lot_accepts_empty_success_body() -> None:
    responses.add(responses.POST, f"{BASE}{COMMIT_LOT_PATH}", body="", status=200)

    response = _session().lots_client().commit_lot(_request())

    assert response.folio == "F-10"
    assert response.lot_id is None
    assert responses.calls[0].request.headers["Idempotency-Key"].startswith("bascula-f-10-")


def test_commit_lot_validates_before_sending() -> None:
    with pytest.raises(LotValidationError, match="total_kg"):
        _session().lots_client().commit_lot(_request(total_kg=Decimal("99.00")))


@responses.activate
def test_commit_lot_conflict_is_not_retried() -> None:
    responses.add(responses.POST, f"{BASE}{COMMIT_LOT_PATH}", json={"error": "Folio duplicado"}, status=409)

    with pytest.raises(ConflictError):
        _session().lots_client().commit_lot(_request())

    assert len(responses.calls) == 1


@pytest.mark.parametrize("body", [[{"IdLote": 3}], True, 42, "Lote guardado"])
@responses.activate
def test_commit_lot_non_object_success_body_is_still_a_commit(body: object) -> None:
    responses.add(responses.POST, f"{BASE}{COMMIT_LOT_PATH}", json=body, status=201)

    response = _session().lots_client().commit_lot(_request())

    assert response.folio == "F-10"
    assert response.lot_id is None


@responses.activate
def test_commit_lot_coerces_loose_text_fields() -> None:
    responses.add(
        responses.POST,
        f"{BASE}{COMMIT_LOT_PATH}",
        json={"id": 8, "folio": 123, "message": ["Lote guardado", "3 detalles"]},
        status=201,
    )

    response = _session().lots_client().commit_lot(_request())

    assert response.lot_id == 8
    assert response.folio == "123"
    assert response.message == "Lote guardado; 3 detalles"


@responses.activate
def test_commit_lot_unreadable_object_body_falls_back_to_request_folio() -> None:
    responses.add(
        responses.POST,
        f"{BASE}{COMMIT_LOT_PATH}",
        json={"IdLote": {"nested": True}, "message": {"text": "ok"}},
        status=200,
    )

    response = _session().lots_client().commit_lot(_request())

    assert response.folio == "F-10"
    assert response.lot_id is None
    assert len(responses.calls) == 1
