from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from bascula_client_sdk import (
    IdempotencyKeys,
    LotCommitRequest,
    LotValidationError,
    ensure_valid_lot,
    new_idempotency_keys,
)

from bascula_console.engine.errors import CommitFailure, FinalizationInProgressError, ValidationError
from bascula_console.engine.session import WeighingSession
from bascula_console.services.lots_service import LotCommitResult, LotsServiceError

logger = logging.getLogger(__name__)


class LotCommitter(Protocol):
    def commit_lot(self, request: LotCommitRequest, *, keys: IdempotencyKeys | None = None) -> LotCommitResult:
        ...


@dataclass(frozen=True)
class LotReceipt:
    folio: str
    total_kg: Decimal
    record_count: int
    lot_id: int | str | None = None
    trace_id: str | None = None


class LotFinalizer:
    """Submits the open lot of a session exactly once per attempt.

    The idempotency key is minted on the first attempt for a given payload
    and reused while the payload is unchanged, so retrying after a lost
    response never books the lot twice.
    """

    def __init__(self, session: WeighingSession, committer: LotCommitter) -> None:
        self.session = session
        self.committer = committer
        self._in_flight = False
        self._attempt: tuple[str, IdempotencyKeys] | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def pending_keys(self) -> IdempotencyKeys | None:
        return self._attempt[1] if self._attempt else None

    def build_request(self, notes: str | None = None) -> LotCommitRequest:
        session = self.session
        provider = session.header.provider
        if provider is None:
            raise ValidationError("Select a provider before closing the lot", fields=["provider"])
        records = session.ledger.snapshot()
        return LotCommitRequest(
            provider_id=provider.id,
            provider_name=provider.legal_name,
            folio=session.header.folio,
            notes=session.header.notes if notes is None else notes,
            details=[record.to_detail() for record in records],
            total_kg=session.ledger.total(),
            operator_id=session.operator.user_id,
        )

    def finalize(self, notes: str | None = None) -> LotReceipt:
        if self._in_flight:
            raise FinalizationInProgressError("A lot is already being submitted")
        session = self.session
        if notes is not None:
            session.set_notes(notes)
        session.begin_finalize()
        self._in_flight = True
        try:
            request = self._validated_request()
            keys = self._keys_for(request)
            with session.busy_with("finalize"):
                result = self.committer.commit_lot(request, keys=keys)
        except LotsServiceError as exc:
            session.abort_finalize()
            logger.warning(
                "lot_finalize_failed",
                extra={"station": session.profile.key, "folio": session.header.folio, "trace_id": exc.trace_id},
            )
            raise CommitFailure(
                exc.message, details=exc.details, trace_id=exc.trace_id, retryable=exc.retryable
            ) from exc
        except Exception:
            session.abort_finalize()
            raise
        finally:
            self._in_flight = False

        receipt = LotReceipt(
            folio=result.response.folio or request.folio,
            total_kg=request.total_kg,
            record_count=len(request.details),
            lot_id=result.response.lot_id,
            trace_id=result.response.trace_id,
        )
        self._attempt = None
        session.complete_finalize()
        logger.info(
            "lot_finalized",
            extra={"station": session.profile.key, "folio": receipt.folio, "records": receipt.record_count},
        )
        return receipt

    def forget_attempt(self) -> None:
        """Drop the pending idempotency key, e.g. after the operator resets the station."""
        self._attempt = None

    def _validated_request(self) -> LotCommitRequest:
        request = self.build_request()
        try:
            ensure_valid_lot(request)
        except LotValidationError as exc:
            raise LotsServiceError(message=str(exc), details="CLIENT_VALIDATION", retryable=False) from exc
        return request

    def _keys_for(self, request: LotCommitRequest) -> IdempotencyKeys:
        fingerprint = json.dumps(request.to_wire(), sort_keys=True)
        if self._attempt is not None and self._attempt[0] == fingerprint:
            return self._attempt[1]
        keys = new_idempotency_keys(prefix=request.folio)
        self._attempt = (fingerprint, keys)
        return keys
