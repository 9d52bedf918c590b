from __future__ import annotations

import logging
from dataclasses import dataclass

from bascula_client_sdk import (
    ApiSession,
    IdempotencyKeys,
    LotCommitRequest,
    LotCommitResponse,
    LotValidationError,
    resolve_idempotency_keys,
    to_user_facing_error,
)
from bascula_client_sdk.exceptions import ApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LotMutationMeta:
    transaction_id: str
    idempotency_key: str


@dataclass
class LotsServiceError(RuntimeError):
    message: str
    details: str | None = None
    trace_id: str | None = None
    retryable: bool = False

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class LotCommitResult:
    response: LotCommitResponse
    meta: LotMutationMeta


class LotsService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def commit_lot(
        self,
        request: LotCommitRequest,
        *,
        keys: IdempotencyKeys | None = None,
    ) -> LotCommitResult:
        meta = self._mutation_meta(keys, request.folio)
        logger.info(
            "lot_commit_attempt",
            extra={"folio": request.folio, "records": len(request.details), "transaction_id": meta.transaction_id},
        )
        try:
            response = self.session.lots_client().commit_lot(
                request,
                transaction_id=meta.transaction_id,
                idempotency_key=meta.idempotency_key,
            )
        except Exception as exc:
            error = self._normalize_error(exc)
            logger.warning(
                "lot_commit_failed",
                extra={"folio": request.folio, "error": error.message, "trace_id": error.trace_id},
            )
            raise error from exc
        logger.info("lot_commit_success", extra={"folio": request.folio, "lot_id": response.lot_id})
        return LotCommitResult(response=response, meta=meta)

    @staticmethod
    def _mutation_meta(keys: IdempotencyKeys | None, folio: str) -> LotMutationMeta:
        resolved = keys or resolve_idempotency_keys(prefix=folio)
        return LotMutationMeta(transaction_id=resolved.transaction_id, idempotency_key=resolved.idempotency_key)

    @staticmethod
    def _normalize_error(exc: Exception) -> LotsServiceError:
        if isinstance(exc, LotsServiceError):
            return exc
        if isinstance(exc, ApiError):
            user_facing = to_user_facing_error(exc)
            return LotsServiceError(
                message=user_facing.message,
                details=user_facing.technical_details,
                trace_id=user_facing.trace_id,
                retryable=user_facing.retryable,
            )
        if isinstance(exc, LotValidationError):
            return LotsServiceError(message=str(exc), details="CLIENT_VALIDATION")
        return LotsServiceError(message=str(exc) or "Unexpected lot commit error", retryable=True)
