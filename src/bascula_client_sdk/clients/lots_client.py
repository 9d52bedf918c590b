from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..idempotency import IdempotencyKeys, resolve_idempotency_keys
from ..lot_validation import ensure_valid_lot
from ..models_lots import LotCommitRequest, LotCommitResponse
from .base import BaseClient

logger = logging.getLogger(__name__)

COMMIT_LOT_PATH = "/api/pesaje/guardar-lote"


@dataclass
class LotsClient(BaseClient):
    def commit_lot(
        self,
        payload: LotCommitRequest | Mapping[str, Any],
        transaction_id: str | None = None,
        idempotency_key: str | None = None,
    ) -> LotCommitResponse:
        request = ensure_valid_lot(payload)
        keys: IdempotencyKeys = resolve_idempotency_keys(transaction_id, idempotency_key, prefix=request.folio)
        data = self._request(
            "POST",
            COMMIT_LOT_PATH,
            json_body=request.to_wire(),
            headers=keys.headers(),
            retry_mutation=False,
            module="lots",
            operation="commit_lot",
        )
        return self._parse_response(data, request)

    @staticmethod
    def _parse_response(data: object, request: LotCommitRequest) -> LotCommitResponse:
        # Any 2xx means the lot is stored; the body only adds details when it has them.
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("commit_lot_unexpected_body", extra={"folio": request.folio, "body_type": type(data).__name__})
            return LotCommitResponse(folio=request.folio)
        try:
            response = LotCommitResponse.model_validate(data)
        except PydanticValidationError as exc:
            logger.warning("commit_lot_unparsed_body", extra={"folio": request.folio, "error_count": exc.error_count()})
            return LotCommitResponse(folio=request.folio)
        if response.folio is None:
            response = response.model_copy(update={"folio": request.folio})
        return response
